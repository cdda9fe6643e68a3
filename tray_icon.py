"""System-tray icon setup via pystray."""

from typing import Callable

import pystray
from PIL import Image
from pystray import MenuItem, Menu

from calendar_logic import WeekClass

_TOOLTIPS = {
    WeekClass.NONE: "no holidays this week",
    WeekClass.LIGHT: "1 holiday this week",
    WeekClass.DENSE: "several holidays this week",
}


def tray_title(country: str, week_class: WeekClass) -> str:
    return f"Holiday Calendar – {country}: {_TOOLTIPS[week_class]}"


def create_tray(
    icon_image: Image.Image,
    on_show: Callable[[], None],
    on_exit: Callable[[], None],
    on_monthly: Callable[[], None] | None = None,
    on_quarterly: Callable[[], None] | None = None,
    title: str = "Holiday Calendar",
) -> pystray.Icon:
    """Build and return a pystray Icon (not yet started)."""
    items: list[MenuItem | Menu] = [
        MenuItem("Show Calendar", lambda _icon, _item: on_show(), default=True),
    ]
    if on_monthly is not None:
        items.append(MenuItem("Monthly View", lambda _icon, _item: on_monthly()))
    if on_quarterly is not None:
        items.append(MenuItem("Quarterly View", lambda _icon, _item: on_quarterly()))
    items.append(Menu.SEPARATOR)
    items.append(MenuItem("Exit", lambda _icon, _item: on_exit()))
    return pystray.Icon("holiday-calendar", icon_image, title, Menu(*items))


def update_tray(icon: pystray.Icon, image: Image.Image, title: str) -> None:
    """Swap the image and tooltip of a running tray icon."""
    icon.icon = image
    icon.title = title
