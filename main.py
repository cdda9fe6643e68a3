"""Entry point — glues pystray (daemon thread) with tkinter (main thread)."""

import logging
import threading
from datetime import date

from calendar_controller import CalendarController, CalendarView, ViewMode
from calendar_logic import WeekClass, week_containing
from calendar_window import CalendarWindow
from holiday_api import HolidayCache, HolidayClient
from icon_gen import create_icon_image
from settings import load_settings
from tray_icon import create_tray, tray_title, update_tray

logger = logging.getLogger(__name__)


def today_week_class(view: CalendarView, today: date) -> WeekClass:
    """Return the classification of the week holding ``today`` (none if not shown)."""
    for month in view.months:
        week = week_containing(month.weeks, today)
        if week is not None:
            return week.classification
    return WeekClass.NONE


def main() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=settings["log_level"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    client = HolidayClient(
        HolidayCache(),
        base_url=settings["api_base_url"],
        timeout=settings["request_timeout"],
    )
    controller = CalendarController(
        client,
        country=settings["default_country"],
        mode=ViewMode(settings["default_view"]),
    )

    tray = None

    # Runs on the tkinter thread after each fresh render
    def on_rendered(view: CalendarView) -> None:
        today = date.today()
        week_class = today_week_class(view, today)
        if tray is not None:
            update_tray(tray, create_icon_image(today, week_class, settings["week_colors"]),
                        tray_title(view.country, week_class))

    cal_win = CalendarWindow(controller, settings["week_colors"], on_rendered=on_rendered)

    # Callbacks marshalled onto the tkinter main thread
    def on_show() -> None:
        cal_win.root.after(0, cal_win.toggle)

    def on_monthly() -> None:
        cal_win.root.after(0, cal_win.set_mode, ViewMode.MONTHLY)

    def on_quarterly() -> None:
        cal_win.root.after(0, cal_win.set_mode, ViewMode.QUARTERLY)

    def on_exit() -> None:
        def _quit() -> None:
            tray.stop()
            cal_win.root.destroy()
        cal_win.root.after(0, _quit)

    tray = create_tray(create_icon_image(), on_show, on_exit,
                       on_monthly=on_monthly, on_quarterly=on_quarterly)

    # Run pystray in a daemon thread so it doesn't block tkinter
    tray_thread = threading.Thread(target=tray.run, daemon=True)
    tray_thread.start()

    logger.info(f"Starting holiday calendar for {controller.country} ({controller.mode.value})")
    cal_win.load_countries()
    cal_win.show()
    # tkinter main loop on the main thread
    cal_win.root.mainloop()


if __name__ == "__main__":
    main()
