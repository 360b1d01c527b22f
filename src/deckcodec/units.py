# units.py
"""Conversions between EMU (English Metric Units), points, inches and device pixels.

1 inch = 914400 EMU, 1 point = 12700 EMU, and the display side of the codec works at 96 DPI,
so one device pixel is exactly 9525 EMU.
"""

EMU_PER_INCH = 914400
EMU_PER_POINT = 12700
DPI = 96
EMU_PER_PIXEL = EMU_PER_INCH // DPI  # 9525
POINTS_PER_INCH = 72

# Rotation in the wire format is stored in 60,000ths of a degree.
ROTATION_UNITS_PER_DEGREE = 60000


# region emu <-> pixels
def emu_to_pixels(emu: float) -> int:
    """Convert EMU to whole device pixels."""
    return round(emu / EMU_PER_PIXEL)


def pixels_to_emu(pixels: float) -> int:
    """Convert device pixels to whole EMU."""
    return round(pixels * EMU_PER_PIXEL)


# endregion


# region emu <-> points
def emu_to_points(emu: float) -> float:
    return emu / EMU_PER_POINT


def points_to_emu(points: float) -> int:
    return round(points * EMU_PER_POINT)


# endregion


# region points <-> pixels
def points_to_pixels(points: float) -> float:
    return points * DPI / POINTS_PER_INCH


def pixels_to_points(pixels: float) -> float:
    return pixels * POINTS_PER_INCH / DPI


def centipoints_to_pixels(centipoints: float) -> float:
    """Font sizes are stored in hundredths of a point."""
    return points_to_pixels(centipoints / 100)


# endregion


# region pixels <-> inches
def pixels_to_inches(pixels: float) -> float:
    return pixels / DPI


def inches_to_pixels(inches: float) -> float:
    return inches * DPI


# endregion


# region parse_int / parse_rotation
def parse_int(value: str | None, default: int = 0) -> int:
    """Parse an integer XML attribute, returning the default when it is absent or malformed."""
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        try:
            return int(float(value))
        except (ValueError, OverflowError):
            return default


def parse_rotation(value: str | None) -> float:
    """
    Convert a rotation attribute (60,000ths of a degree) to degrees.

    An absent or unparseable value converts to exactly 0.
    """
    units = parse_int(value, 0)
    if units == 0:
        return 0
    degrees = units / ROTATION_UNITS_PER_DEGREE
    # Keep whole degrees as ints so 5400000 reads back as 90, not 90.0
    return int(degrees) if degrees.is_integer() else degrees


# endregion
