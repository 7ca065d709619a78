"""
HydroFlow Calculator V1.0
Main Application with Desktop Shell

CustomTkinter window with the calculation log, diagnostics and the log export menu.
"""

import logging
import queue
import tkinter as tk
from pathlib import Path
from tkinter import filedialog, messagebox, scrolledtext

import customtkinter as ctk

from hydroflow.config import (
    ConfigManager,
    ExportConfig,
    CALCULATION_LOGGER_NAME,
    EXPORT_FORMATS,
    SCOPE_ALL,
    SCOPE_LAST,
    SCOPE_LABELS,
)
from hydroflow.exporter import HydroFlowExporter
from hydroflow.log_store import AppLog, AppLogHandler, LogFileError, format_log_entry
from hydroflow.sinks import ExportError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S"
)
logger = logging.getLogger(__name__)


# ================= THREAD-SAFE LOGGING HANDLER =================

class QueueHandler(logging.Handler):
    """Logging handler that forwards formatted records to a queue."""

    def __init__(self, log_queue):
        super().__init__()
        self.log_queue = log_queue

    def emit(self, record):
        self.log_queue.put(self.format(record))


# ================= MAIN GUI APPLICATION =================

class HydroFlowGUI:
    """Desktop shell around the calculation log and its export."""

    def __init__(self):
        self.config_manager = ConfigManager()
        self.user_config = self.config_manager.load_config()

        ctk.set_appearance_mode(self.user_config.get("theme", "dark"))
        ctk.set_default_color_theme("blue")

        self.root = ctk.CTk()
        self.root.title("HydroFlow Calculator")
        self.root.geometry(self.user_config.get("window_geometry", "1600x1200"))

        # Variables
        self.output_folder = ctk.StringVar(value=self.user_config.get("output_folder", str(Path.cwd())))
        self.export_format_var = tk.StringVar(value=self.user_config.get("export_format", "txt"))

        # State
        self.app_log = AppLog()
        self.exporter = HydroFlowExporter(self.app_log, self.output_folder.get(), self._show_notice)
        self.log_queue = queue.Queue()
        self._shown_entries = 0

        self._setup_menu()
        self._setup_ui()
        self._setup_logging()

        self.root.after(100, self._poll_logs)
        self.root.protocol("WM_DELETE_WINDOW", self._on_closing)

    def _setup_menu(self):
        """Build the File and View menus."""
        menubar = tk.Menu(self.root)

        file_menu = tk.Menu(menubar, tearoff=0)
        file_menu.add_command(label="Otevřít log...", command=self.open_log_file)
        file_menu.add_command(label="Uložit log...", command=self.save_log_file)

        export_menu = tk.Menu(file_menu, tearoff=0)
        export_menu.add_command(label=SCOPE_LABELS[SCOPE_LAST], command=lambda: self.export_logs(SCOPE_LAST))
        export_menu.add_command(label=SCOPE_LABELS[SCOPE_ALL], command=lambda: self.export_logs(SCOPE_ALL))
        export_menu.add_separator()
        for fmt in EXPORT_FORMATS:
            export_menu.add_radiobutton(
                label=fmt.upper(),
                value=fmt,
                variable=self.export_format_var,
                command=self.set_export_format
            )
        file_menu.add_cascade(label="Exportovat Logy...", menu=export_menu)

        file_menu.add_separator()
        file_menu.add_command(label="Konec", command=self._on_closing)
        menubar.add_cascade(label="File", menu=file_menu)

        view_menu = tk.Menu(menubar, tearoff=0)
        view_menu.add_command(label="Vymazat log", command=self.clear_log)
        view_menu.add_command(label="Přepnout motiv", command=self.toggle_theme)
        menubar.add_cascade(label="View", menu=view_menu)

        self.root.configure(menu=menubar)

    def _setup_ui(self):
        """Setup output folder row and log tabs."""
        folder_frame = ctk.CTkFrame(self.root)
        folder_frame.pack(fill="x", padx=10, pady=(10, 0))

        ctk.CTkLabel(folder_frame, text="📂 Výstupní složka:").pack(side="left", padx=10)
        ctk.CTkEntry(
            folder_frame,
            textvariable=self.output_folder,
            height=32
        ).pack(side="left", padx=(0, 10), expand=True, fill="x")
        ctk.CTkButton(
            folder_frame,
            text="Browse",
            command=self.select_output_folder,
            width=100
        ).pack(side="right", padx=10, pady=10)

        self.tabview = ctk.CTkTabview(self.root)
        self.tabview.pack(fill="both", expand=True, padx=10, pady=10)
        self.tab_calc_log = self.tabview.add("📝 Log výpočtů")
        self.tab_diagnostics = self.tabview.add("🛠 Diagnostika")

        self.calc_log_text = self._create_log_view(self.tab_calc_log)
        self.diagnostics_text = self._create_log_view(self.tab_diagnostics)

        self.status_label = ctk.CTkLabel(self.root, text="Ready", font=ctk.CTkFont(size=12))
        self.status_label.pack(pady=(0, 10))

    def _create_log_view(self, parent):
        dark = self.user_config.get("theme", "dark") == "dark"
        text = scrolledtext.ScrolledText(
            parent,
            state='disabled',
            font=("Consolas", 10),
            bg="#1e1e1e" if dark else "white",
            fg="#e0e0e0" if dark else "black"
        )
        text.pack(fill="both", expand=True, padx=10, pady=10)
        return text

    def _setup_logging(self):
        """Mirror diagnostics into the UI and collect calculation messages into the app log."""
        queue_handler = QueueHandler(self.log_queue)
        queue_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s", "%H:%M:%S"))
        logging.getLogger("hydroflow").addHandler(queue_handler)
        logger.addHandler(queue_handler)

        logging.getLogger(CALCULATION_LOGGER_NAME).addHandler(AppLogHandler(self.app_log))

    @staticmethod
    def _append_text(widget, text: str):
        widget.configure(state='normal')
        widget.insert("end", text)
        widget.see("end")
        widget.configure(state='disabled')

    def _poll_logs(self):
        """Poll the diagnostics queue and new app log entries and update UI."""
        while True:
            try:
                message = self.log_queue.get_nowait()
            except queue.Empty:
                break
            self._append_text(self.diagnostics_text, message + '\n')

        entries = self.app_log.entries()
        if len(entries) > self._shown_entries:
            new_lines = "".join(format_log_entry(e) + '\n' for e in entries[self._shown_entries:])
            self._append_text(self.calc_log_text, new_lines)
            self._shown_entries = len(entries)

        self.root.after(100, self._poll_logs)

    # === EVENT HANDLERS ===

    def select_output_folder(self):
        folder = filedialog.askdirectory(initialdir=self.output_folder.get())
        if folder:
            self.output_folder.set(folder)

    def open_log_file(self):
        """Append entries from a saved log file."""
        path = filedialog.askopenfilename(
            initialdir=str(Path(self.user_config.get("last_log_file") or Path.cwd()).parent),
            filetypes=[("Log files", "*.log *.txt"), ("All files", "*.*")]
        )
        if not path:
            return

        try:
            count = self.app_log.load_file(path)
        except LogFileError as e:
            logger.error(f"Log load error: {e}")
            messagebox.showerror("Chyba", str(e))
            return

        self.user_config["last_log_file"] = path
        self.status_label.configure(text=f"Načteno {count} záznamů z {Path(path).name}")

    def save_log_file(self):
        path = filedialog.asksaveasfilename(
            defaultextension=".log",
            filetypes=[("Log files", "*.log"), ("All files", "*.*")]
        )
        if not path:
            return

        try:
            self.app_log.save_file(path)
        except LogFileError as e:
            logger.error(f"Log save error: {e}")
            messagebox.showerror("Chyba", str(e))

    def set_export_format(self):
        logger.info(f"Export format set to: {self.export_format_var.get()}")

    def export_logs(self, scope: str):
        """Export the calculation log with the selected scope and current format."""
        export_config = ExportConfig(scope=scope, export_format=self.export_format_var.get())
        self.exporter.set_output_dir(self.output_folder.get())

        try:
            path = self.exporter.export(export_config)
        except ExportError as e:
            logger.error(f"Export error: {e}", exc_info=True)
            messagebox.showerror("Chyba", f"Export selhal: {e}")
            return

        if path:
            self.status_label.configure(text=f"Exportováno: {path}")

    def _show_notice(self, message: str):
        messagebox.showinfo("HydroFlow", message)

    def clear_log(self):
        """Clear the calculation log and its view."""
        self.app_log.clear()
        self._shown_entries = 0
        for widget in (self.calc_log_text, self.diagnostics_text):
            widget.configure(state='normal')
            widget.delete(1.0, "end")
            widget.configure(state='disabled')

    def toggle_theme(self):
        current = ctk.get_appearance_mode()
        new_theme = "light" if current == "Dark" else "dark"
        ctk.set_appearance_mode(new_theme)

        bg = "#1e1e1e" if new_theme == "dark" else "white"
        fg = "#e0e0e0" if new_theme == "dark" else "black"
        for widget in (self.calc_log_text, self.diagnostics_text):
            widget.config(bg=bg, fg=fg)

        self.user_config["theme"] = new_theme
        self.config_manager.save_config(self.user_config)
        logger.info(f"Theme changed to: {new_theme}")

    def _on_closing(self):
        """Save preferences and close the window."""
        self.user_config["window_geometry"] = self.root.geometry()
        self.user_config["output_folder"] = self.output_folder.get()
        self.user_config["export_format"] = self.export_format_var.get()
        self.config_manager.save_config(self.user_config)
        self.root.destroy()

    def run(self):
        """Start the GUI event loop."""
        self.root.mainloop()


# ================= MAIN ENTRY POINT =================

def main():
    """Main entry point."""
    app = HydroFlowGUI()
    app.run()


if __name__ == "__main__":
    main()
