"""Layout analysis: reading order of detected regions."""
