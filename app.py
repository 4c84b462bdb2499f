# app.py
# CustomTkinter front end for the spelling engine.
# Pick a frequency dictionary (file or folder), optionally persist it to SQLite,
# then type to get suggestions. Engine log records are mirrored into the log pane.

from __future__ import annotations
import logging
import threading
from typing import List, Optional

import tkinter.filedialog as fd
import tkinter.messagebox as mb
import customtkinter as ctk

from spellcore import config as CFG
from spellcore.engine import Engine
from spellcore.models import Suggestion, Verbosity

MAX_ROWS = 50
DEBOUNCE_MS = 160


def shorten_path(p: str, max_chars: int = 60) -> str:
    """Elide the middle of long paths for labels."""
    if len(p) <= max_chars:
        return p
    keep = max_chars // 2 - 3
    return p[:keep] + "..." + p[-keep:]


def format_suggestion(s: Suggestion) -> str:
    return f"dist: {s.distance:<2} | freq: {s.frequency:<12,} | {s.term}"


class _PaneHandler(logging.Handler):
    """Forwards spellcore log records to the app's log pane on the Tk thread."""

    def __init__(self, app: "SpellApp") -> None:
        super().__init__(level=logging.INFO)
        self.app = app
        self.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        msg = self.format(record)
        self.app.after(0, lambda: self.app.append_log(msg))


class SpellApp(ctk.CTk):
    def __init__(self) -> None:
        super().__init__()
        ctk.set_appearance_mode("dark")
        ctk.set_default_color_theme("blue")
        self.title("spellcore")
        self.geometry("760x600")
        self.minsize(640, 480)

        self._engine: Optional[Engine] = None
        self._worker: Optional[threading.Thread] = None
        self._pending_search: Optional[str] = None
        self._rows: List[List[ctk.CTkLabel]] = []

        self.font_mono = ctk.CTkFont(family="Consolas, Menlo, Courier New", size=13)

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=3)
        self.grid_rowconfigure(3, weight=1)

        self._make_toolbar()
        self._make_query_row()
        self._make_table()
        self._make_log_pane()

        self._log_handler = _PaneHandler(self)
        logging.getLogger("spellcore").addHandler(self._log_handler)
        logging.getLogger("spellcore").setLevel(logging.INFO)

        self.protocol("WM_DELETE_WINDOW", self._on_close)

    # /* ~~~ layout ~~~ */

    def _make_toolbar(self) -> None:
        bar = ctk.CTkFrame(self)
        bar.grid(row=0, column=0, sticky="ew", padx=10, pady=(10, 4))
        bar.grid_columnconfigure(3, weight=1)

        ctk.CTkButton(bar, text="Open file", width=100,
                      command=lambda: self._pick(fd.askopenfilename(
                          title="Frequency dictionary",
                          filetypes=[("Text files", "*.txt"), ("All files", "*.*")]))
                      ).grid(row=0, column=0, padx=(8, 4), pady=8)
        ctk.CTkButton(bar, text="Open folder", width=100,
                      command=lambda: self._pick(fd.askdirectory(title="Folder of .txt dictionaries"))
                      ).grid(row=0, column=1, padx=4, pady=8)

        self.sw_sqlite = ctk.CTkSwitch(bar, text="Save to SQLite")
        self.sw_sqlite.grid(row=0, column=2, padx=8, pady=8)

        self.lbl_source = ctk.CTkLabel(bar, text="no dictionary", anchor="w")
        self.lbl_source.grid(row=0, column=3, sticky="ew", padx=4)

        self.progress = ctk.CTkProgressBar(bar, mode="indeterminate", width=90)
        self.progress.grid(row=0, column=4, padx=(4, 8))
        self.progress.set(0)

    def _make_query_row(self) -> None:
        row = ctk.CTkFrame(self, fg_color="transparent")
        row.grid(row=1, column=0, sticky="ew", padx=10, pady=4)
        row.grid_columnconfigure(0, weight=1)

        self.entry = ctk.CTkEntry(row, placeholder_text="misspeled word", font=self.font_mono)
        self.entry.grid(row=0, column=0, sticky="ew", padx=(0, 6))
        self.entry.bind("<KeyRelease>", self._schedule_search)
        self.entry.bind("<Return>", lambda _e: self._search_now())

        self.seg_verbosity = ctk.CTkSegmentedButton(
            row, values=[v.value for v in Verbosity], command=lambda _v: self._search_now()
        )
        self.seg_verbosity.set(CFG.DEFAULT_VERBOSITY)
        self.seg_verbosity.grid(row=0, column=1, padx=6)

        # per-query bound, capped by the index's max edit distance
        self.opt_distance = ctk.CTkOptionMenu(
            row, width=70,
            values=[str(d) for d in range(CFG.MAX_EDIT_DISTANCE, -1, -1)],
            command=lambda _v: self._search_now(),
        )
        self.opt_distance.grid(row=0, column=2)

    def _make_table(self) -> None:
        self.table = ctk.CTkScrollableFrame(self, label_text="Suggestions")
        self.table.grid(row=2, column=0, sticky="nsew", padx=10, pady=4)
        self.table.grid_columnconfigure(0, weight=1)
        for col, name in enumerate(("term", "distance", "frequency")):
            ctk.CTkLabel(self.table, text=name, anchor="w" if col == 0 else "e",
                         text_color="gray60").grid(row=0, column=col, sticky="ew", padx=8)

    def _make_log_pane(self) -> None:
        self.txt_log = ctk.CTkTextbox(self, height=100, font=ctk.CTkFont(size=12))
        self.txt_log.grid(row=3, column=0, sticky="nsew", padx=10, pady=(4, 10))
        self.append_log("Open a dictionary file or folder to begin.")

    # /* ~~~ building ~~~ */

    def _pick(self, path: str) -> None:
        if not path:
            return
        if self._worker and self._worker.is_alive():
            mb.showinfo("Busy", "Still building the previous dictionary.")
            return
        dsn = "memory://"
        if self.sw_sqlite.get():
            target = fd.asksaveasfilename(title="SQLite database", defaultextension=".sqlite")
            if not target:
                return
            dsn = f"sqlite:///{target}"

        self.lbl_source.configure(text=shorten_path(path))
        self.progress.start()
        self._worker = threading.Thread(target=self._build, args=([path], dsn), daemon=True)
        self._worker.start()

    def _build(self, paths: List[str], dsn: str) -> None:
        engine = Engine()
        try:
            admitted = engine.build(paths, db_dsn=dsn)
        except Exception as exc:
            engine.shutdown()
            self.after(0, lambda err=exc: self._build_failed(err))
            return
        self.after(0, lambda: self._build_done(engine, admitted))

    def _build_done(self, engine: Engine, admitted: int) -> None:
        self.progress.stop()
        if self._engine is not None:
            self._engine.shutdown()
        self._engine = engine
        self.append_log(f"{admitted:,} terms indexed")
        self.entry.focus_set()
        self._search_now()

    def _build_failed(self, exc: Exception) -> None:
        self.progress.stop()
        self.append_log(f"build failed: {exc}")
        mb.showerror("Build failed", str(exc))

    # /* ~~~ lookup ~~~ */

    def _schedule_search(self, _ev=None) -> None:
        if self._pending_search is not None:
            self.after_cancel(self._pending_search)
        self._pending_search = self.after(DEBOUNCE_MS, self._search_now)

    def _search_now(self) -> None:
        if self._pending_search is not None:
            self.after_cancel(self._pending_search)
            self._pending_search = None
        word = self.entry.get().strip()
        if not word or self._engine is None:
            self._show([])
            return
        results = self._engine.lookup(
            word, self.seg_verbosity.get(), int(self.opt_distance.get())
        )
        self._show(results)
        if results:
            self.append_log(f"{word!r} -> {format_suggestion(results[0])}")

    def _show(self, results: List[Suggestion]) -> None:
        for labels in self._rows:
            for label in labels:
                label.destroy()
        self._rows = []
        for i, s in enumerate(results[:MAX_ROWS], start=1):
            cells = [
                ctk.CTkLabel(self.table, text=s.term, anchor="w", font=self.font_mono),
                ctk.CTkLabel(self.table, text=str(s.distance), anchor="e", font=self.font_mono),
                ctk.CTkLabel(self.table, text=f"{s.frequency:,}", anchor="e", font=self.font_mono),
            ]
            for col, cell in enumerate(cells):
                cell.grid(row=i, column=col, sticky="ew", padx=8)
            self._rows.append(cells)

    # /* ~~~ misc ~~~ */

    def append_log(self, msg: str) -> None:
        self.txt_log.insert("end", msg + "\n")
        self.txt_log.see("end")

    def _on_close(self) -> None:
        logging.getLogger("spellcore").removeHandler(self._log_handler)
        if self._engine is not None:
            self._engine.shutdown()
            self._engine = None
        self.destroy()


if __name__ == "__main__":
    SpellApp().mainloop()
