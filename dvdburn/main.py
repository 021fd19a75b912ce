#!/usr/bin/env python3
"""
DVDBurn - Main Application

A small desktop window that turns a video file into a DVD: either burned
straight to a blank disc or saved as an ISO image.
"""

import logging
import sys
from typing import Optional

from .config import PipelineConfig, check_dependencies
from .dialogs import GUI_AVAILABLE, TkDialogs
from .pipeline import PipelineOrchestrator
from .result import PipelineResult

if GUI_AVAILABLE:
    import customtkinter as ctk

    ctk.set_appearance_mode("dark")
    ctk.set_default_color_theme("blue")
    _BaseClass = ctk.CTk
else:
    _BaseClass = object

logger = logging.getLogger(__name__)


class DVDBurnApp(_BaseClass):
    """Main application window."""

    def __init__(self, config: Optional[PipelineConfig] = None):
        super().__init__()

        self.title("DVDBurn")
        self.geometry("640x420")
        self.minsize(480, 320)

        self.pipeline_config = config or PipelineConfig.from_environment()
        self.dialogs = TkDialogs(self)
        self.orchestrator = PipelineOrchestrator(
            self.pipeline_config,
            select_source=self.dialogs.select_source,
            choose_drive=self.dialogs.choose_drive,
            select_save_path=self.dialogs.select_save_path,
            log_callback=self._log
        )

        self._create_ui()

        # Check dependencies on startup
        self.after(100, self._check_dependencies)

    def _create_ui(self):
        """Create the main UI layout."""
        frame = ctk.CTkFrame(self)
        frame.pack(fill="both", expand=True, padx=20, pady=20)

        title = ctk.CTkLabel(
            frame,
            text="Video to DVD",
            font=ctk.CTkFont(size=20, weight="bold")
        )
        title.pack(pady=(0, 20))

        button_frame = ctk.CTkFrame(frame, fg_color="transparent")
        button_frame.pack(fill="x", pady=10)

        self.burn_btn = ctk.CTkButton(
            button_frame,
            text="📀 Burn DVD",
            command=lambda: self._on_start(image_only=False)
        )
        self.burn_btn.pack(side="left", expand=True, padx=10)

        self.iso_btn = ctk.CTkButton(
            button_frame,
            text="💾 Create ISO",
            command=lambda: self._on_start(image_only=True)
        )
        self.iso_btn.pack(side="left", expand=True, padx=10)

        self.status_label = ctk.CTkLabel(frame, text="Ready.", anchor="w")
        self.status_label.pack(fill="x", padx=10, pady=(10, 0))

        log_label = ctk.CTkLabel(frame, text="Log Output:")
        log_label.pack(anchor="w", padx=10)

        self.log_text = ctk.CTkTextbox(frame, height=200)
        self.log_text.pack(fill="both", expand=True, padx=10, pady=5)

    def _check_dependencies(self):
        """Log which external tools are missing."""
        deps = check_dependencies(self.pipeline_config.tools)
        missing = [name for name, available in deps.items() if not available]

        if missing:
            self._log(f"⚠️ Missing tools: {', '.join(missing)}")
        else:
            self._log("✓ All tools available")

    def _on_start(self, image_only: bool):
        """Handle either button - runs the pipeline on a worker thread."""
        self.burn_btn.configure(state="disabled")
        self.iso_btn.configure(state="disabled")
        self._set_status("Creating ISO..." if image_only else "Burning DVD...")

        self.orchestrator.start(
            image_only,
            on_complete=lambda result: self.after(0, lambda: self._on_finished(result))
        )

    def _on_finished(self, result: PipelineResult):
        if result.success:
            self._set_status(f"✓ {result.log}")
        elif result.canceled:
            self._set_status(result.error)
        else:
            self._set_status("⚠️ Failed. See the log for details.")

        self.burn_btn.configure(state="normal")
        self.iso_btn.configure(state="normal")

    def _set_status(self, message: str):
        """Update the status line."""
        self.status_label.configure(text=message)

    def _log(self, message: str):
        """Add message to log output."""
        def update():
            self.log_text.insert("end", message + "\n")
            self.log_text.see("end")

        self.after(0, update)


def main():
    """Run the DVDBurn application."""
    if not GUI_AVAILABLE:
        from .dialogs import GUI_ERROR
        print("Error: GUI dependencies not available.")
        print(f"Missing: {GUI_ERROR}")
        print("\nTo install GUI dependencies:")
        print("  pip install customtkinter")
        print("\nOn Linux, you may also need:")
        print("  sudo apt install python3-tk")
        sys.exit(1)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        config = PipelineConfig.from_environment()
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    app = DVDBurnApp(config)
    app.mainloop()


if __name__ == "__main__":
    main()
