"""LAMS key ids of the level labels known to the games."""

_MASK64 = (1 << 64) - 1
_HIGH_DEFAULT = 0xC8509800


def _fold(chunk: bytes) -> int:
    value = 0
    for char in reversed(chunk.ljust(32, b" ")):
        value = (value * 0x1B + char) & _MASK64
    return value


def lams(tag: str) -> int:
    """Hash a translation tag into its 32-bit LAMS key id."""
    raw = tag.encode("utf-8")
    low = _fold(raw[:32])
    high = _fold(raw[32:64]) if len(raw) > 32 else _HIGH_DEFAULT
    return (low + high * 0xDEADBEEF) & 0xFFFFFFFF


_ALL_LABELS = (
    "LABEL_SinglePlayer",
    "LABEL_RPG",
    "LABEL_Multiplayer",
    "LABEL_SINGLE_PLAYER",
    "LABEL_Musical",
    "LABEL_Artistic",
    "LABEL_Funny",
    "LABEL_Scary",
    "LABEL_Easy",
    "LABEL_Challenging",
    "LABEL_Long",
    "LABEL_Quick",
    "LABEL_Time_Trial",
    "LABEL_Seasonal",
    "LABEL_16_Bit",
    "LABEL_8_Bit",
    "LABEL_Homage",
    "LABEL_Technology",
    "LABEL_Pinball",
    "LABEL_Movie",
    "LABEL_Sticker_Gallery",
    "LABEL_Costume_Gallery",
    "LABEL_Music_Gallery",
    "LABEL_Prop_Hunt",
    "LABEL_Hide_And_Seek",
    "LABEL_Hangout",
    "LABEL_Driving",
    "LABEL_Defence",
    "LABEL_Party_Game",
    "LABEL_Mini_Game",
    "LABEL_Card_Game",
    "LABEL_Board_Game",
    "LABEL_Arcade_Game",
    "LABEL_Social",
    "LABEL_Sci_Fi",
    "LABEL_3rd_Person",
    "LABEL_1st_Person",
    "LABEL_CO_OP",
    "LABEL_TOP_DOWN",
    "LABEL_Retro",
    "LABEL_Tutorial",
    "LABEL_SurvivalChallenge",
    "LABEL_Strategy",
    "LABEL_Story",
    "LABEL_Sports",
    "LABEL_Shooter",
    "LABEL_Race",
    "LABEL_Platform",
    "LABEL_Puzzle",
    "LABEL_Gallery",
    "LABEL_Fighter",
    "LABEL_Competitive",
    "LABEL_Cinematic",
    "LABEL_FLOATY_FLUID_NAME",
    "LABEL_HOVERBOARD_NAME",
    "LABEL_SPRINGINATOR",
    "LABEL_SACKPOCKET",
    "LABEL_QUESTS",
    "LABEL_INTERACTIVE_STREAM",
    "LABEL_WALLJUMP",
    "LABEL_MEMORISER",
    "LABEL_HEROCAPE",
    "LABEL_ATTRACT_TWEAK",
    "LABEL_ATTRACT_GEL",
    "LABEL_Paint",
    "LABEL_Movinator",
    "LABEL_Brain_Crane",
    "LABEL_Water",
    "LABEL_Vehicles",
    "LABEL_Sackbots",
    "LABEL_PowerGlove",
    "LABEL_Paintinator",
    "LABEL_LowGravity",
    "LABEL_MagicBag",
    "LABEL_JumpPads",
    "LABEL_GrapplingHook",
    "LABEL_Glitch",
    "LABEL_Explosives",
    "LABEL_DirectControl",
    "LABEL_Collectables",
    "LABEL_CREATED_CHARACTERS",
    "LABEL_SACKBOY",
    "LABEL_SWOOP",
    "LABEL_TOGGLE",
    "LABEL_ODDSOCK",
)

_LBP2_LABELS = (
    "LABEL_SinglePlayer",
    "LABEL_Multiplayer",
    "LABEL_Quick",
    "LABEL_Long",
    "LABEL_Challenging",
    "LABEL_Easy",
    "LABEL_Scary",
    "LABEL_Funny",
    "LABEL_Artistic",
    "LABEL_Musical",
    "LABEL_Intricate",
    "LABEL_Cinematic",
    "LABEL_Competitive",
    "LABEL_Fighter",
    "LABEL_Gallery",
    "LABEL_Puzzle",
    "LABEL_Platform",
    "LABEL_Race",
    "LABEL_Shooter",
    "LABEL_Sports",
    "LABEL_Story",
    "LABEL_Strategy",
    "LABEL_SurvivalChallenge",
    "LABEL_Tutorial",
    "LABEL_Retro",
    "LABEL_Collectables",
    "LABEL_DirectControl",
    "LABEL_Explosives",
    "LABEL_Glitch",
    "LABEL_GrapplingHook",
    "LABEL_JumpPads",
    "LABEL_MagicBag",
    "LABEL_LowGravity",
    "LABEL_Paintinator",
    "LABEL_PowerGlove",
    "LABEL_Sackbots",
    "LABEL_Vehicles",
    "LABEL_Water",
    "LABEL_Brain_Crane",
    "LABEL_Movinator",
    "LABEL_Paint",
    "LABEL_ATTRACT_GEL",
    "LABEL_ATTRACT_TWEAK",
    "LABEL_HEROCAPE",
    "LABEL_MEMORISER",
    "LABEL_WALLJUMP",
)

# Bit i of a level's author-label bitfield refers to entry i of this table.
LABEL_LAMS_KEY_IDS: tuple[int, ...] = tuple(lams(name) for name in _ALL_LABELS)

# Labels that LBP2 understands; others are dropped from LBP2 slot lists.
LBP2_LABELS: frozenset[int] = frozenset(lams(name) for name in _LBP2_LABELS)