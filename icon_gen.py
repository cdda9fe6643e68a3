"""Generate the system-tray icon (64×64 PIL Image, in-memory)."""

from datetime import date

from PIL import Image, ImageDraw, ImageFont

from calendar_logic import WeekClass

_BACKGROUNDS = {
    WeekClass.NONE: "#FFFFFF",
    WeekClass.LIGHT: "#C8E6C9",
    WeekClass.DENSE: "#43A047",
}


ICON_SIZE = 64
ICON_MARGIN = 4
FONT_FILE = "DejaVuSans-Bold.ttf"


def icon_background(week_class: WeekClass, colors: dict[str, str] | None = None) -> str:
    """Return the background colour for a week classification."""
    if colors and week_class is not WeekClass.NONE and week_class.value in colors:
        return colors[week_class.value]
    return _BACKGROUNDS[week_class]


def _fit_font(draw: ImageDraw.ImageDraw, text: str, box: int):
    """Largest TrueType font whose rendering of ``text`` fits a ``box`` square.

    Falls back to Pillow's built-in bitmap font when no TrueType file is found.
    """
    try:
        ImageFont.truetype(FONT_FILE, 10)
    except OSError:
        return ImageFont.load_default()

    low, high = 10, box * 2
    while low < high:
        mid = (low + high + 1) // 2
        left, top, right, bottom = draw.textbbox((0, 0), text, font=ImageFont.truetype(FONT_FILE, mid))
        if right - left <= box and bottom - top <= box:
            low = mid
        else:
            high = mid - 1
    return ImageFont.truetype(FONT_FILE, low)


def create_icon_image(
    day: date | None = None,
    week_class: WeekClass = WeekClass.NONE,
    colors: dict[str, str] | None = None,
) -> Image.Image:
    """Return a 64×64 RGBA image: day of month on the current week's holiday colour."""
    img = Image.new("RGBA", (ICON_SIZE, ICON_SIZE), icon_background(week_class, colors))
    draw = ImageDraw.Draw(img)

    text = str((day or date.today()).day)
    font = _fit_font(draw, text, ICON_SIZE - 2 * ICON_MARGIN)

    # Centre on the inked box, not the font's advance metrics
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    x = (ICON_SIZE - (right - left)) / 2 - left
    y = (ICON_SIZE - (bottom - top)) / 2 - top
    draw.text((x, y), text, font=font,
              fill="white" if week_class is WeekClass.DENSE else "black")
    return img
