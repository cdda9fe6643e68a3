"""Monthly / rolling-quarter holiday calendar window (tkinter)."""

import asyncio
import logging
import threading
from tkinter import font as tkfont
from tkinter import messagebox
from tkinter import ttk
import tkinter as tk
from typing import Callable

from calendar_controller import CalendarController, CalendarView, ViewMode
from calendar_logic import DAY_ABBR, GridCell, MonthView, WeekClass
from holiday_api import COUNTRIES_UNAVAILABLE

logger = logging.getLogger(__name__)

# Colours
ACCENT = "#0078D4"
HEADER_BG = "#F3F3F3"
GRID_BG = "white"
FILLER_FG = "#AAAAAA"
WEEKEND_FG = "#CC0000"
HOLIDAY_FG = "#1B5E20"
FOOTER_FG = "#555555"
WARNING_FG = "#B45309"

MAX_WEEKS = 6


class _HolidayTip:
    """Shared popup listing the holidays of the hovered day cell."""

    __slots__ = ("_root", "_popup")

    def __init__(self, root: tk.Tk) -> None:
        self._root = root
        self._popup: tk.Toplevel | None = None

    @staticmethod
    def text_for(cell: GridCell) -> str:
        lines = [cell.date.strftime("%a %d.%m.%Y")]
        lines.extend(f"• {name}" for name in cell.holiday_names)
        return "\n".join(lines)

    def show(self, canvas: tk.Widget, cell: GridCell) -> None:
        self.hide()
        popup = tk.Toplevel(self._root)
        popup.wm_overrideredirect(True)
        popup.wm_attributes("-topmost", True)
        tk.Label(
            popup, text=self.text_for(cell), bg="#FFFFE0", fg=HOLIDAY_FG,
            relief="solid", borderwidth=1, padx=6, pady=3, justify="left",
        ).pack()
        popup.wm_geometry(f"+{canvas.winfo_rootx()}+{canvas.winfo_rooty() + canvas.winfo_height() + 2}")
        self._popup = popup

    def hide(self) -> None:
        if self._popup is not None:
            self._popup.destroy()
            self._popup = None


class _MonthPanel:
    """Pre-allocated widget pool for a single month (header + 6 weeks max)."""

    __slots__ = ("frame", "header", "day_headers", "day_cells")

    def __init__(self, parent: tk.Frame, fonts: dict, on_enter, on_leave) -> None:
        self.frame = tk.Frame(parent, bg=GRID_BG)

        self.header = tk.Label(
            self.frame, font=fonts["header"], bg=HEADER_BG, fg="#333333",
        )
        self.header.grid(row=0, column=0, columnspan=7, sticky="we", pady=(0, 2))

        self.day_headers: list[tk.Label] = []
        for col, abbr in enumerate(DAY_ABBR):
            fg = WEEKEND_FG if col in (0, 6) else "#333333"
            lbl = tk.Label(
                self.frame, text=abbr, font=fonts["bold"], bg=GRID_BG, fg=fg, width=4,
            )
            lbl.grid(row=1, column=col)
            self.day_headers.append(lbl)

        self.day_cells: list[tk.Canvas] = []
        for i in range(MAX_WEEKS * 7):
            cell = tk.Canvas(
                self.frame, width=fonts["cell_w"], height=fonts["cell_h"],
                bg=GRID_BG, highlightthickness=0, borderwidth=0,
            )
            cell.grid(row=i // 7 + 2, column=i % 7, padx=1, pady=1)
            cell.bind("<Enter>", on_enter)
            cell.bind("<Leave>", on_leave)
            self.day_cells.append(cell)


class CalendarWindow:
    """Holiday calendar with country selection and monthly/quarterly views."""

    def __init__(self, controller: CalendarController,
                 week_colors: dict[str, str] | None = None,
                 on_rendered: Callable[[CalendarView], None] | None = None) -> None:
        self.controller = controller
        self.week_colors = dict(week_colors or {"light": "#C8E6C9", "dense": "#43A047"})
        self._on_rendered = on_rendered

        self.root = tk.Tk()
        self.root.title("Holiday Calendar")
        self.root.configure(bg=GRID_BG)
        self._setup_fonts()

        # Render requests are never cancelled; results of older generations are dropped
        self._generation = 0
        self._view: CalendarView | None = None
        self._cell_dates: dict[int, GridCell] = {}
        self._country_names: dict[str, str] = {}
        self._last_warnings: tuple[str, ...] = ()

        _tmp = tk.Label(self.root, text="00", font=self.font_normal, width=4)
        _tmp.update_idletasks()
        self._panel_fonts = {
            "header": self.font_header, "bold": self.font_bold,
            "normal": self.font_normal,
            "cell_w": _tmp.winfo_reqwidth(), "cell_h": _tmp.winfo_reqheight() + 6,
        }
        _tmp.destroy()

        self._panels: list[_MonthPanel] = []
        self._build_shell()
        self._tooltip = _HolidayTip(self.root)

        self.root.bind("<Escape>", lambda _e: self.hide())
        self.root.bind("<Left>", lambda _e: self._navigate(-1))
        self.root.bind("<Right>", lambda _e: self._navigate(1))
        self.root.protocol("WM_DELETE_WINDOW", self.hide)

    # ------------------------------------------------------------------
    # Fonts
    # ------------------------------------------------------------------
    def _setup_fonts(self) -> None:
        families = tkfont.families(self.root)
        base = "Segoe UI" if "Segoe UI" in families else "TkDefaultFont"
        self.font_normal = tkfont.Font(family=base, size=9)
        self.font_bold = tkfont.Font(family=base, size=9, weight="bold")
        self.font_header = tkfont.Font(family=base, size=10, weight="bold")
        self.font_nav = tkfont.Font(family=base, size=12, weight="bold")

    # ------------------------------------------------------------------
    # Build shell (once) — toolbar + months placeholder + footer
    # ------------------------------------------------------------------
    def _build_shell(self) -> None:
        self._outer = tk.Frame(self.root, bg=GRID_BG)
        self._outer.pack(padx=6, pady=4)

        bar = tk.Frame(self._outer, bg=GRID_BG)
        bar.pack(fill="x", pady=(0, 4))

        self._country_var = tk.StringVar(value=self.controller.country)
        self._country_box = ttk.Combobox(
            bar, textvariable=self._country_var, state="readonly", width=28,
        )
        self._country_box.pack(side="left", padx=(0, 8))
        self._country_box.bind("<<ComboboxSelected>>", self._on_country_selected)

        self._mode_var = tk.StringVar(value=self.controller.mode.value)
        for mode, text in ((ViewMode.MONTHLY, "Monthly"), (ViewMode.QUARTERLY, "Quarterly")):
            tk.Radiobutton(
                bar, text=text, value=mode.value, variable=self._mode_var,
                indicatoron=False, width=9, font=self.font_normal,
                command=self._on_mode_selected,
            ).pack(side="left")

        self._weeks_only_var = tk.BooleanVar(value=False)
        tk.Checkbutton(
            bar, text="Holiday weeks only", variable=self._weeks_only_var,
            bg=GRID_BG, font=self.font_normal, command=self._redraw,
        ).pack(side="left", padx=(8, 0))

        # Navigation row: ◀  <label>  ▶   Today
        nav = tk.Frame(self._outer, bg=GRID_BG)
        nav.pack(fill="x", pady=(0, 2))

        btn_prev = tk.Label(nav, text="◀", font=self.font_nav, bg=GRID_BG, cursor="hand2")
        btn_prev.pack(side="left", padx=6)
        btn_prev.bind("<Button-1>", lambda _e: self._navigate(-1))

        self._title_label = tk.Label(nav, font=self.font_header, bg=GRID_BG, fg="#333333")
        self._title_label.pack(side="left", expand=True)

        btn_today = tk.Label(
            nav, text="Today", font=self.font_bold, bg=GRID_BG, fg=ACCENT, cursor="hand2",
        )
        btn_today.pack(side="right", padx=6)
        btn_today.bind("<Button-1>", lambda _e: self._go_today())

        btn_next = tk.Label(nav, text="▶", font=self.font_nav, bg=GRID_BG, cursor="hand2")
        btn_next.pack(side="right", padx=6)
        btn_next.bind("<Button-1>", lambda _e: self._navigate(1))

        self._months_frame = tk.Frame(self._outer, bg=GRID_BG)
        self._months_frame.pack()

        self._footer_label = tk.Label(
            self._outer, font=self.font_normal, bg=GRID_BG, fg=FOOTER_FG,
        )
        self._footer_label.pack(pady=(4, 0))

    # ------------------------------------------------------------------
    # Background work: coroutine on a worker thread, result on the Tk thread
    # ------------------------------------------------------------------
    def _run_async(self, coro_factory, on_done, on_error=None) -> None:
        def worker() -> None:
            try:
                result = asyncio.run(coro_factory())
            except Exception as e:
                logger.exception("Background calendar task failed")
                if on_error is not None:
                    self.root.after(0, on_error, e)
                return
            self.root.after(0, on_done, result)

        threading.Thread(target=worker, daemon=True).start()

    def load_countries(self) -> None:
        self._run_async(self.controller.load_countries, self._apply_countries,
                        self._show_failure)

    def _apply_countries(self, countries) -> None:
        if not countries:
            self._warn([COUNTRIES_UNAVAILABLE])
        self._country_names = {f"{c.name} ({c.code})": c.code for c in countries}
        self._country_box.configure(values=list(self._country_names))
        selected = next((label for label, code in self._country_names.items()
                         if code == self.controller.country), self.controller.country)
        self._country_var.set(selected)
        self.request_render()

    def request_render(self) -> None:
        self._generation += 1
        generation = self._generation
        self._footer_label.configure(text="Loading holidays…", fg=FOOTER_FG)
        self._run_async(self.controller.render,
                        lambda view: self._apply_view(generation, view),
                        lambda error: self._render_failed(generation, error))

    def _apply_view(self, generation: int, view: CalendarView) -> None:
        if generation != self._generation:
            logger.debug(f"Dropping stale render for '{view.label}'")
            return
        self._view = view
        self._redraw()
        if view.warnings:
            self._warn(view.warnings)
        else:
            self._last_warnings = ()
        if self._on_rendered is not None:
            self._on_rendered(view)

    def _render_failed(self, generation: int, error: Exception) -> None:
        if generation == self._generation:
            self._show_failure(error)

    def _show_failure(self, error: Exception) -> None:
        self._footer_label.configure(text=f"Could not update calendar: {error}", fg=WARNING_FG)

    def _warn(self, warnings: list[str]) -> None:
        """Pop up fetch problems, once per distinct set of messages."""
        key = tuple(warnings)
        if key == self._last_warnings:
            return
        self._last_warnings = key
        messagebox.showwarning("Holiday Calendar", "\n".join(warnings), parent=self.root)

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------
    def _redraw(self) -> None:
        view = self._view
        if view is None:
            return
        self._cell_dates.clear()
        self._title_label.configure(text=view.label)

        while len(self._panels) < len(view.months):
            self._panels.append(_MonthPanel(
                self._months_frame, self._panel_fonts,
                self._on_cell_enter, self._on_cell_leave,
            ))
        for i, month in enumerate(view.months):
            panel = self._panels[i]
            panel.frame.grid(row=i, column=0, padx=6, pady=2, sticky="n")
            self._fill_panel(panel, month)
        for panel in self._panels[len(view.months):]:
            panel.frame.grid_forget()

        self._footer_label.configure(text=self._footer_text(view),
                                     fg=WARNING_FG if view.warnings else FOOTER_FG)

    def _fill_panel(self, panel: _MonthPanel, month: MonthView) -> None:
        """Reconfigure an existing panel's cells — no widget creation."""
        panel.header.configure(text=month.label)
        weeks_only = self._weeks_only_var.get()
        for i, canvas in enumerate(panel.day_cells):
            cell = month.cells[i] if i < len(month.cells) else None
            if cell is None or (weeks_only and cell.week_class is WeekClass.NONE):
                canvas.delete("all")
                canvas.configure(bg=GRID_BG)
                continue
            bg, fg = self._cell_colors(cell)
            font = self.font_bold if cell.is_today or cell.is_holiday else self.font_normal
            self._draw_cell(canvas, str(cell.date.day), bg, fg, font,
                            underline=cell.is_holiday)
            self._cell_dates[id(canvas)] = cell

    # ------------------------------------------------------------------
    # Day colour logic
    # ------------------------------------------------------------------
    def _cell_colors(self, cell: GridCell) -> tuple[str, str]:
        if cell.is_today:
            return ACCENT, "white"
        bg = self.week_colors.get(cell.week_class.value, GRID_BG)
        if cell.is_filler:
            return bg, FILLER_FG
        if cell.is_holiday:
            return bg, HOLIDAY_FG
        if cell.is_weekend:
            return bg, WEEKEND_FG
        return bg, "black"

    def _draw_cell(self, canvas: tk.Canvas, text: str, bg: str, fg: str,
                   font, underline: bool = False) -> None:
        canvas.delete("all")
        canvas.configure(bg=bg)
        w = canvas.winfo_width()
        h = canvas.winfo_height()
        if w <= 1:
            w = int(canvas["width"])
        if h <= 1:
            h = int(canvas["height"])
        canvas.create_text(w // 2, h // 2, text=text, fill=fg, font=font)
        if underline:
            canvas.create_line(w // 4, h - 3, w - w // 4, h - 3, fill=fg, width=2)

    # ------------------------------------------------------------------
    # Tooltip on hover
    # ------------------------------------------------------------------
    def _on_cell_enter(self, event: tk.Event) -> None:
        cell = self._cell_dates.get(id(event.widget))
        if cell and cell.holiday_names:
            self._tooltip.show(event.widget, cell)

    def _on_cell_leave(self, _event: tk.Event) -> None:
        self._tooltip.hide()

    # ------------------------------------------------------------------
    # Footer text
    # ------------------------------------------------------------------
    @staticmethod
    def _footer_text(view: CalendarView) -> str:
        if view.warnings:
            return " ".join(view.warnings)
        holidays = sum(len(c.holiday_names) for m in view.months
                       for c in m.cells if not c.is_filler)
        dense = sum(1 for m in view.months for w in m.weeks
                    if w.classification is WeekClass.DENSE)
        today_str = f"Today: {view.today.strftime('%d.%m.%Y')}"
        return (f"{view.country}: {holidays} holiday{'s' if holidays != 1 else ''}, "
                f"{dense} busy week{'s' if dense != 1 else ''}     {today_str}")

    # ------------------------------------------------------------------
    # Toolbar events / navigation
    # ------------------------------------------------------------------
    def _on_country_selected(self, _event=None) -> None:
        label = self._country_var.get()
        code = self._country_names.get(label, label)
        self.controller.set_country(code)
        self.request_render()

    def _on_mode_selected(self) -> None:
        self.set_mode(ViewMode(self._mode_var.get()))

    def set_mode(self, mode: ViewMode) -> None:
        self._mode_var.set(mode.value)
        self.controller.set_mode(mode)
        self.request_render()

    def _navigate(self, direction: int) -> None:
        self.controller.navigate(direction)
        self.request_render()

    def _go_today(self) -> None:
        self.controller.go_today()
        self.request_render()

    # ------------------------------------------------------------------
    # Show / Hide / Toggle
    # ------------------------------------------------------------------
    def toggle(self) -> None:
        if self.root.state() == "withdrawn" or not self.root.winfo_viewable():
            self.show()
        else:
            self.hide()

    def show(self) -> None:
        self.root.deiconify()
        self.root.lift()
        self.root.focus_force()

    def hide(self) -> None:
        self._tooltip.hide()
        self.root.withdraw()
