"""
Dialogs Module

Tk implementations of the interactive steps of the pipeline: picking the
video, picking the burner and picking where to save the ISO. The pipeline
runs on a worker thread, so every dialog is shown on the Tk thread and the
worker waits for the answer.
"""

import logging
import queue
import threading
from pathlib import Path
from typing import Callable, Optional

try:
    import customtkinter as ctk
    from tkinter import filedialog
    GUI_AVAILABLE = True
except ImportError as e:
    GUI_AVAILABLE = False
    GUI_ERROR = str(e)

logger = logging.getLogger(__name__)

VIDEO_FILETYPES = [("Movies", "*.mp4 *.mov *.mkv *.avi"), ("All Files", "*.*")]
ISO_FILETYPES = [("ISO Image", "*.iso"), ("All Files", "*.*")]


if GUI_AVAILABLE:
    _ToplevelBase = ctk.CTkToplevel
else:
    _ToplevelBase = object


class DriveChoiceDialog(_ToplevelBase):
    """Modal dialog with one button per drive plus Cancel."""

    def __init__(self, master, drives: list[str]):
        super().__init__(master)

        self.title("Choose Drive")
        self.resizable(False, False)
        self.choice: Optional[str] = None

        label = ctk.CTkLabel(
            self,
            text="Please select your DVD burner:",
            font=ctk.CTkFont(size=14, weight="bold")
        )
        label.pack(padx=20, pady=(20, 10))

        for drive in drives:
            button = ctk.CTkButton(
                self,
                text=drive,
                command=lambda d=drive: self._on_choose(d)
            )
            button.pack(fill="x", padx=20, pady=5)

        cancel_btn = ctk.CTkButton(
            self,
            text="Cancel",
            fg_color="gray",
            command=self.destroy
        )
        cancel_btn.pack(fill="x", padx=20, pady=(5, 20))

        self.protocol("WM_DELETE_WINDOW", self.destroy)
        self.transient(master)
        self.after(10, self.grab_set)

    def _on_choose(self, drive: str):
        self.choice = drive
        self.destroy()


class TkDialogs:
    """Pipeline collaborators backed by Tk dialogs."""

    def __init__(self, root):
        self.root = root

    def _call_on_ui_thread(self, func: Callable, *args):
        """Run func on the Tk thread and wait for its return value."""
        if threading.current_thread() is threading.main_thread():
            return func(*args)

        answer: queue.Queue = queue.Queue(maxsize=1)

        def invoke():
            try:
                answer.put((True, func(*args)))
            except Exception as e:
                answer.put((False, e))

        self.root.after(0, invoke)
        ok, value = answer.get()
        if not ok:
            raise value
        return value

    def select_source(self) -> Optional[Path]:
        """Ask for the video file to put on the disc."""
        def ask():
            return filedialog.askopenfilename(
                parent=self.root,
                title="Select a Video File",
                filetypes=VIDEO_FILETYPES
            )

        filepath = self._call_on_ui_thread(ask)
        return Path(filepath) if filepath else None

    def choose_drive(self, drives: list[str]) -> Optional[str]:
        """Ask which drive to burn to."""
        def ask():
            dialog = DriveChoiceDialog(self.root, drives)
            self.root.wait_window(dialog)
            return dialog.choice

        return self._call_on_ui_thread(ask)

    def select_save_path(self, default_path: Path) -> Optional[Path]:
        """Ask where the ISO file should be saved."""
        def ask():
            return filedialog.asksaveasfilename(
                parent=self.root,
                title="Save ISO File",
                defaultextension=".iso",
                filetypes=ISO_FILETYPES,
                initialfile=default_path.name,
                initialdir=str(default_path.parent)
            )

        filepath = self._call_on_ui_thread(ask)
        return Path(filepath) if filepath else None
