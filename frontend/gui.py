#!/usr/bin/env python3
"""
Calculator GUI

Tkinter front end for backend.engine.CalculatorEngine. The window only renders
engine state and forwards user input as engine commands; it never edits the
display text itself.

Features:
- Primary display, secondary line for the pending operation, memory readout.
- Basic keypad (digits, operators, memory and clear rows).
- Scientific panel toggled from the header (trig, logs, roots, powers, constants).
- Light/dark theme toggle.
- History list below the keypad; clicking an entry recalls its result.
- Keyboard input translated by frontend.keymap onto the same commands.
"""

import logging
import tkinter as tk
from tkinter import messagebox
from typing import Callable, Dict, List, Optional, Tuple

from backend.engine import CalculatorEngine, CalculatorError, CalculatorState, Command
from backend.numeric import format_number
from frontend.keymap import translate_key

logger = logging.getLogger(__name__)


# -------------------------
# Visual theme / constants
# -------------------------
WINDOW_WIDTH = 380
WINDOW_HEIGHT = 640

THEMES: Dict[str, Dict[str, str]] = {
    "dark": {
        "bg": "#0f1113",        # main app background
        "panel": "#17181A",     # panels / container background
        "button": "#2b2d30",    # button tile background
        "accent": "#3a6ea5",    # operator and equals tiles
        "fg": "#E6EEF3",        # foreground text
        "display": "#4ade80",   # display digits
    },
    "light": {
        "bg": "#f3f4f6",
        "panel": "#e5e7eb",
        "button": "#ffffff",
        "accent": "#93c5fd",
        "fg": "#1f2937",
        "display": "#15803d",
    },
}

TITLE_FONT = ("Segoe UI", 13, "bold")
DISPLAY_FONT = ("Consolas", 24)
SMALL_FONT = ("Consolas", 11)

BASIC_KEYS = [
    [("MC", Command("memory", "MC")), ("MR", Command("memory", "MR")),
     ("M+", Command("memory", "M+")), ("M-", Command("memory", "M-"))],
    [("AC", Command("clear", "AC")), ("C", Command("clear", "C")),
     ("CE", Command("clear", "CE")), ("÷", Command("operator", "÷"))],
    [("7", Command("char", "7")), ("8", Command("char", "8")),
     ("9", Command("char", "9")), ("×", Command("operator", "×"))],
    [("4", Command("char", "4")), ("5", Command("char", "5")),
     ("6", Command("char", "6")), ("-", Command("operator", "-"))],
    [("1", Command("char", "1")), ("2", Command("char", "2")),
     ("3", Command("char", "3")), ("+", Command("operator", "+"))],
    [("0", Command("char", "0")), (".", Command("char", ".")),
     ("⌫", Command("backspace")), ("=", Command("operator", "="))],
]

SCIENTIFIC_KEYS = [
    [("sin", "sin"), ("cos", "cos"), ("tan", "tan"), ("log", "log"), ("ln", "ln")],
    [("eˣ", "exp"), ("√", "sqrt"), ("π", "pi"), ("e", "e"), ("n!", "fact")],
    [("xʸ", "^"), ("1/x", "inv"), ("x²", "square"), ("x³", "cube"), ("10ˣ", "10x")],
]

OPERATOR_LABELS = {"÷", "×", "-", "+", "="}


# -------------------------
# Main application class
# -------------------------
class CalculatorGUI(tk.Tk):
    def __init__(self, engine: Optional[CalculatorEngine] = None):
        super().__init__()

        # Window setup
        self.title("Calculator")
        self.geometry(f"{WINDOW_WIDTH}x{WINDOW_HEIGHT}")
        self.minsize(340, 560)

        # Backend engine instance; the window re-renders whenever its state changes
        self.engine = engine or CalculatorEngine()
        self._unsubscribe = self.engine.subscribe(self._render)

        # Internal state (presentation only)
        self.theme = "dark"
        self.scientific_visible = False
        self._themed: List[Tuple[tk.Widget, str]] = []   # (widget, role) pairs re-colored on theme change

        # Build UI sections
        self._build_header()
        self._build_display()
        self._build_scientific_panel()
        self._build_keypad()
        self._build_history()

        self._apply_theme()
        self._render(self.engine.state)

        # Keyboard input goes through the same command path as the keypad
        self.bind_all("<Key>", self._on_key, add="+")
        self.protocol("WM_DELETE_WINDOW", self._on_close)

    def _register(self, widget: tk.Widget, role: str) -> tk.Widget:
        """Remember a widget so _apply_theme can recolor it."""
        self._themed.append((widget, role))
        return widget

    # -------------------------
    # Header: title, scientific toggle, theme toggle
    # -------------------------
    def _build_header(self):
        header = self._register(tk.Frame(self, height=48), "panel")
        header.pack(fill="x", side="top")

        self._register(tk.Label(header, text="Calculator", font=TITLE_FONT), "panel_label").pack(
            side="left", padx=(10, 0), pady=6)

        # Spacer to push the toggles to the right
        self._register(tk.Frame(header), "panel").pack(side="left", expand=True)

        self.theme_btn = self._register(
            tk.Button(header, text="Light", relief="flat", command=self.toggle_theme), "panel_label")
        self.theme_btn.pack(side="right", padx=6, pady=6)

        self.sci_btn = self._register(
            tk.Button(header, text="Scientific ▾", relief="flat", command=self.toggle_scientific), "panel_label")
        self.sci_btn.pack(side="right", padx=6, pady=6)

    # -------------------------
    # Display: memory, pending operation, buffer
    # -------------------------
    def _build_display(self):
        disp = self._register(tk.Frame(self), "panel")
        disp.pack(fill="x", padx=8, pady=(8, 0))

        self.memory_var = tk.StringVar()
        self._register(tk.Label(disp, textvariable=self.memory_var, anchor="w", font=SMALL_FONT),
                       "panel_label").pack(fill="x", padx=6, pady=(6, 0))

        self.pending_var = tk.StringVar()
        self._register(tk.Label(disp, textvariable=self.pending_var, anchor="e", font=SMALL_FONT),
                       "panel_label").pack(fill="x", padx=6)

        self.display_var = tk.StringVar()
        self._register(tk.Label(disp, textvariable=self.display_var, anchor="e", font=DISPLAY_FONT),
                       "display").pack(fill="x", padx=6, pady=(0, 6))

    # -------------------------
    # Scientific panel (hidden until toggled)
    # -------------------------
    def _build_scientific_panel(self):
        self.sci_frame = self._register(tk.Frame(self), "panel")
        for r, row in enumerate(SCIENTIFIC_KEYS):
            for c, (label, func) in enumerate(row):
                btn = tk.Button(self.sci_frame, text=label, relief="flat",
                                command=self._command_handler(Command("function", func)))
                self._register(btn, "button").grid(row=r, column=c, sticky="nsew", padx=3, pady=3)
                self.sci_frame.grid_columnconfigure(c, weight=1)

        # parentheses go into the buffer as literal characters
        extras = [("(", Command("char", "(")), (")", Command("char", ")")),
                  ("mod", Command("function", "mod")),
                  ("RAD", None)]
        r = len(SCIENTIFIC_KEYS)
        for c, (label, command) in enumerate(extras):
            if command is None:
                self.angle_btn = tk.Button(self.sci_frame, text=label, relief="flat",
                                           command=self.toggle_angle_mode)
                btn = self.angle_btn
            else:
                btn = tk.Button(self.sci_frame, text=label, relief="flat",
                                command=self._command_handler(command))
            self._register(btn, "button").grid(row=r, column=c, sticky="nsew", padx=3, pady=3)

    def toggle_scientific(self):
        """Show or hide the scientific panel above the keypad."""
        self.scientific_visible = not self.scientific_visible
        if self.scientific_visible:
            self.sci_frame.pack(fill="x", padx=8, pady=(6, 0), before=self.keypad)
            self.sci_btn.config(text="Scientific ▴")
        else:
            self.sci_frame.pack_forget()
            self.sci_btn.config(text="Scientific ▾")

    def toggle_angle_mode(self):
        mode = "deg" if self.engine.state.angle_mode == "rad" else "rad"
        self._dispatch(Command("angle_mode", mode))

    # -------------------------
    # Basic keypad
    # -------------------------
    def _build_keypad(self):
        self.keypad = self._register(tk.Frame(self), "panel")
        self.keypad.pack(fill="both", expand=True, padx=8, pady=(6, 0))
        for r, row in enumerate(BASIC_KEYS):
            for c, (label, command) in enumerate(row):
                btn = tk.Button(self.keypad, text=label, relief="flat",
                                command=self._command_handler(command))
                role = "accent" if label in OPERATOR_LABELS else "button"
                self._register(btn, role).grid(row=r, column=c, sticky="nsew", padx=3, pady=3)
                self.keypad.grid_columnconfigure(c, weight=1)
            self.keypad.grid_rowconfigure(r, weight=1)

    # -------------------------
    # History panel
    # -------------------------
    def _build_history(self):
        frm = self._register(tk.Frame(self), "panel")
        frm.pack(fill="x", padx=8, pady=8)

        top = self._register(tk.Frame(frm), "panel")
        top.pack(fill="x")
        self._register(tk.Label(top, text="Calculation History", font=("Segoe UI", 10, "bold")),
                       "panel_label").pack(side="left", padx=6)
        self.history_count_var = tk.StringVar()
        self._register(tk.Label(top, textvariable=self.history_count_var), "panel_label").pack(
            side="right", padx=6)

        self.history_list = self._register(tk.Listbox(frm, height=6, activestyle="none"), "list")
        self.history_list.pack(fill="x", padx=6, pady=(4, 6))
        # single click re-seeds the display with that entry's result
        self.history_list.bind("<<ListboxSelect>>", self._on_history_select)

    def _on_history_select(self, event):
        sel = self.history_list.curselection()
        if not sel or not self.engine.state.history:
            return
        self._dispatch(Command("recall", sel[0]))

    # -------------------------
    # Command dispatch
    # -------------------------
    def _command_handler(self, command: Command) -> Callable[[], None]:
        return lambda: self._dispatch(command)

    def _dispatch(self, command: Command):
        """Send a command to the engine; wiring errors are logged and shown, never raised into Tk."""
        try:
            self.engine.dispatch(command)
        except CalculatorError as e:
            logger.exception("Command %r rejected", command)
            messagebox.showerror("Calculator", str(e))

    def _on_key(self, event):
        command = translate_key(event.keysym, event.char)
        if command is None:
            return None
        self._dispatch(command)
        return "break"

    # -------------------------
    # Rendering
    # -------------------------
    def _render(self, state: CalculatorState):
        """Project an engine snapshot onto the widgets."""
        self.display_var.set(state.buffer)
        self.pending_var.set(state.pending_expression)
        self.memory_var.set(f"Memory: {format_number(state.memory)}")
        if hasattr(self, "angle_btn"):
            self.angle_btn.config(text=state.angle_mode.upper())

        self.history_list.delete(0, tk.END)
        if state.history:
            for entry in state.history:
                self.history_list.insert(tk.END, entry)
        else:
            self.history_list.insert(tk.END, "No history yet")
        self.history_count_var.set(f"{len(state.history)} items")

    def toggle_theme(self):
        self.theme = "light" if self.theme == "dark" else "dark"
        self.theme_btn.config(text="Dark" if self.theme == "light" else "Light")
        self._apply_theme()

    def _apply_theme(self):
        colors = THEMES[self.theme]
        self.configure(bg=colors["bg"])
        for widget, role in self._themed:
            if role == "panel":
                widget.config(bg=colors["panel"])
            elif role == "panel_label":
                widget.config(bg=colors["panel"], fg=colors["fg"])
            elif role == "display":
                widget.config(bg=colors["panel"], fg=colors["display"])
            elif role == "accent":
                widget.config(bg=colors["accent"], fg=colors["fg"])
            elif role in ("button", "list"):
                widget.config(bg=colors["button"], fg=colors["fg"])

    def _on_close(self):
        self._unsubscribe()
        self.destroy()


# -------------------------
# Run the application
# -------------------------
def main():
    app = CalculatorGUI()
    app.mainloop()


if __name__ == "__main__":
    main()
