"""Named groups of skip attributes offered on the command line."""

# Pre-release and test builds
NO_PROTO = ["Beta", "Proto", "Sample", "Demo", "Program", "Debug"]

# Unlicensed, homebrew and pirate releases
NO_UNLICENSED = ["Homebrew", "Unl", "Aftermarket", "Pirate", "Unknown"]

# Mini console and virtual console re-releases
NO_MINI = ["Virtual Console", "Genesis Mini", "Mega Drive Mini", "Switch Online", "Classic Mini"]

SKIP_PRESETS = {
    "noproto": NO_PROTO,
    "nounl": NO_UNLICENSED,
    "nomini": NO_MINI,
}


def expand_skip_attrs(attrs: list[str], presets: list[str]) -> list[str]:
    """
    Combine explicit skip attributes with named presets.

    Args:
        attrs: Attributes given explicitly
        presets: Preset names from SKIP_PRESETS

    Returns:
        Attributes in order, duplicates removed (case-insensitive)

    Raises:
        KeyError: If a preset name is unknown
    """
    combined = list(attrs)
    for preset in presets:
        combined.extend(SKIP_PRESETS[preset])

    seen = set()
    unique = []
    for attr in combined:
        if attr.lower() not in seen:
            seen.add(attr.lower())
            unique.append(attr)
    return unique
