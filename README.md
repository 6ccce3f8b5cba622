# lbparchive

Downloads a LittleBigPlanet level from a resource archive and writes it out as a
PS3 level backup (a save data directory) that the game can import.

Looking up a level needs a local SQLite database of slot metadata (a `slot`
table keyed by `id`). Downloading its resources needs one of the archive
servers: the Refresh API or archive.org.

## Installation

```
pip install .
```

## Configuration

Settings are read from `config.yml` in the current directory. If that file is
missing, the command prints `config.yml is missing, writing default config`
and writes this default before reading it:

```yaml
database_path: dry.db
backup_directory: backups
download_server: archive
max_parallel_downloads: 5
fix_backup_version: true
force_lbp3_backups: false
```

| key | meaning |
| --- | --- |
| `database_path` | path to the slot database |
| `backup_directory` | directory the backups are written into |
| `download_server` | `archive` (archive.org), or `refresh` / `bonsai` (both use the Refresh API) |
| `max_parallel_downloads` | concurrent downloads; values above 10 are capped at 10 with a warning, 0 is an error |
| `fix_backup_version` | when the database's game and the level data's format disagree, write the backup for the format the data was saved in; otherwise write it for the database's game |
| `force_lbp3_backups` | always write LBP3 backups, as if `--lbp3` were given |

All keys are required.

## Usage

```
lbparchive bkp <level_id>
lbparchive bkp --lbp3 <level_id>
lbparchive --version
```

`level_id` is the slot id from the database. The command prints the level's
name, creator and game, then downloads the root level, its icon and every
resource they refer to by hash, recursively. Each successful download prints
`.` and each one the server refuses prints `!`; the rest of the level is still
downloaded. A resource whose contents do not match its hash aborts the run.

With `--lbp3` (or `force_lbp3_backups`) an LBP3 backup is written whatever the
level was saved as. Warnings go to standard error. On failure the command
prints `Error: ...` to standard error and exits with status 1.

The backup directory is named from the game's title id (`BCES00141`,
`BCES00850` or `BCES01663`), then `LEVEL` (or `ADVLBP3AAZ` for adventures),
then the slot id as eight upper-case hex digits. It contains:

- the encrypted FAR4 save archive, in chunks named `0`, `1`, ...
- `ICON0.PNG`, the level icon scaled onto a transparent 320x176 canvas
  (left blank when the icon is not a downloaded texture)
- `PARAM.SFO`
- `PARAM.PFD` (version 4 for LBP3, 3 otherwise)

Copy this directory into the console's savedata folder to import the level.

## Using it as a library

The pieces of a backup can also be built in memory:

- `lbparchive.db.get_slot_info(level_id, db_path)` returns a `SlotInfo`.
- `lbparchive.resource_dl.download_level(...)` downloads resources
  concurrently and returns a `DownloadResult`.
- `lbparchive.resource_parse.ResrcData.parse(data, parse_texture)` reads a
  resource header, dependency table or texture.
- `lbparchive.slot_list.make_slotlist(revision, slot_info)` serializes a slot
  list resource.
- `lbparchive.save_archive.build_savearchive`, `lbparchive.sfo.build_sfo` and
  `lbparchive.pfd.build_pfd` return the file contents; the matching `make_*`
  functions write them into a directory.

## What it does not do

The package does not provide the slot database, and it does not look levels up
online: a level that is not in the local database cannot be backed up. It
does not compress the slot list it writes, and it only writes backups; it
cannot read or unpack existing ones.