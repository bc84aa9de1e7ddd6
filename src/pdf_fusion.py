"""
PDF Fusion Tool

Merge PDF files in a chosen order, restructure the pages of a PDF onto a
rows x columns grid, or merge and restructure in one step.
Supports drag and drop, drag-to-reorder file lists and a layout preview.

Copyright 2025-2026 Andre Lorbach

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import tkinter as tk
from tkinter import filedialog, messagebox
import tkinter.ttk as ttk
import logging
import argparse
import os
import re
import time
from pathlib import Path

from PIL import ImageTk

from pdf_errors import PdfFusionError, ValidationError
from pdf_layout import GridSpec, HORIZONTAL, VERTICAL
from pdf_merger import merge_documents, restructure_document, merge_and_restructure
from pdf_output import (MERGE, RESTRUCTURE, MERGE_RESTRUCTURE, OPERATIONS,
                        output_filename, save_document, open_file)
from pdf_preview import preview_layout
from source_files import SourceFile, SourceFileList, is_pdf_path
from utils.fusion_config import get_fusion_config

# Drag and drop support (optional)
try:
    from tkinterdnd2 import DND_FILES, TkinterDnD
    DND_AVAILABLE = True
except ImportError:
    DND_AVAILABLE = False

logger = logging.getLogger(__name__)

# ============================================================================
# Modern UI Styling Constants
# ============================================================================

class UIColors:
    """Modern color palette for consistent UI styling."""
    PRIMARY = "#2563eb"
    PRIMARY_HOVER = "#1d4ed8"
    PRIMARY_LIGHT = "#dbeafe"

    SUCCESS = "#16a34a"
    SUCCESS_HOVER = "#15803d"
    ERROR = "#dc2626"
    ERROR_HOVER = "#b91c1c"
    WARNING_LIGHT = "#fef3c7"

    BG_PRIMARY = "#ffffff"
    BG_SECONDARY = "#f8fafc"
    BG_TERTIARY = "#f1f5f9"
    BORDER = "#e2e8f0"
    TEXT_PRIMARY = "#1e293b"
    TEXT_SECONDARY = "#64748b"
    TEXT_MUTED = "#94a3b8"

    DROP_ZONE_BG = "#f8fafc"
    DROP_ZONE_BORDER = "#94a3b8"
    DROP_ZONE_ACTIVE = "#dbeafe"
    DROP_ZONE_BORDER_ACTIVE = "#2563eb"

    GRID_CELL = "#f1f5f9"
    GRID_HOVER = "#93c5fd"
    GRID_SELECTED = "#2563eb"


class UIFonts:
    """Font configurations for consistent typography."""
    TITLE = ("Segoe UI", 18, "bold")
    HEADING = ("Segoe UI", 12, "bold")
    BODY = ("Segoe UI", 10)
    BODY_BOLD = ("Segoe UI", 10, "bold")
    SMALL = ("Segoe UI", 9)
    BUTTON = ("Segoe UI", 10, "bold")


class UISpacing:
    """Consistent spacing values."""
    XS = 2
    SM = 5
    MD = 10
    LG = 15


TAB_TITLES = {
    MERGE: "  Merge  ",
    RESTRUCTURE: "  Restructure  ",
    MERGE_RESTRUCTURE: "  Merge & Restructure  ",
}

ERROR_TITLES = {
    MERGE: "Merge Error",
    RESTRUCTURE: "Restructure Error",
    MERGE_RESTRUCTURE: "Process Error",
}

SUCCESS_MESSAGES = {
    MERGE: "PDFs merged successfully!",
    RESTRUCTURE: "PDF restructured successfully!",
    MERGE_RESTRUCTURE: "PDFs merged and restructured successfully!",
}


def create_rounded_button(parent, text, command, style="primary", width=None):
    """Create a styled button with consistent appearance."""
    colors = {
        "primary": (UIColors.PRIMARY, UIColors.PRIMARY_HOVER, "#ffffff"),
        "secondary": (UIColors.BG_TERTIARY, UIColors.BORDER, UIColors.TEXT_PRIMARY),
        "success": (UIColors.SUCCESS, UIColors.SUCCESS_HOVER, "#ffffff"),
        "danger": (UIColors.ERROR, UIColors.ERROR_HOVER, "#ffffff"),
    }

    bg, hover_bg, fg = colors.get(style, colors["primary"])

    btn = tk.Button(
        parent,
        text=text,
        command=command,
        font=UIFonts.BUTTON,
        bg=bg,
        fg=fg,
        activebackground=hover_bg,
        activeforeground=fg,
        relief="flat",
        cursor="hand2",
        padx=UISpacing.MD,
        pady=UISpacing.SM,
        bd=0,
        highlightthickness=0,
    )

    if width:
        btn.config(width=width)

    btn.bind("<Enter>", lambda e: btn.config(bg=hover_bg) if str(btn['state']) != tk.DISABLED else None)
    btn.bind("<Leave>", lambda e: btn.config(bg=bg))

    return btn


def create_card_frame(parent, title=None, padding=True):
    """Create a card-like frame with optional title."""
    options = dict(
        bg=UIColors.BG_PRIMARY,
        bd=1,
        relief="solid",
        padx=UISpacing.MD if padding else 0,
        pady=UISpacing.SM if padding else 0,
    )
    if title:
        return tk.LabelFrame(parent, text=title, font=UIFonts.HEADING, fg=UIColors.TEXT_PRIMARY, **options)
    return tk.Frame(parent, **options)


def parse_dropped_files(data):
    """Parse dropped file paths, keeping PDFs only."""
    if '{' in data:
        files = re.findall(r'\{([^}]+)\}', data)
        remaining = re.sub(r'\{[^}]+\}', '', data).strip()
        if remaining:
            files.extend(remaining.split())
    else:
        files = data.split()
    return [f for f in files if is_pdf_path(f)]


# ============================================================================
# Widgets
# ============================================================================

class FileListPanel:
    """Drop zone plus a reorderable list bound to a SourceFileList."""

    def __init__(self, parent, title, files, on_change, multiple=True):
        self.files = files
        self.on_change = on_change
        self.multiple = multiple
        self.drag_index = None

        self.frame = create_card_frame(parent, title)
        self._create_drop_zone()

        self.listbox = tk.Listbox(
            self.frame,
            height=8,
            font=UIFonts.BODY,
            bg=UIColors.BG_SECONDARY,
            fg=UIColors.TEXT_PRIMARY,
            selectbackground=UIColors.PRIMARY_LIGHT,
            selectforeground=UIColors.TEXT_PRIMARY,
            activestyle="none",
            relief="solid",
            bd=1
        )
        self.listbox.pack(fill=tk.BOTH, expand=True, pady=(UISpacing.SM, UISpacing.SM))

        if multiple:
            self.listbox.bind('<ButtonPress-1>', self.on_drag_start)
            self.listbox.bind('<B1-Motion>', self.on_drag_motion)
            self.listbox.bind('<ButtonRelease-1>', self.on_drag_end)

        button_row = tk.Frame(self.frame, bg=UIColors.BG_PRIMARY)
        button_row.pack(fill=tk.X)
        if multiple:
            create_rounded_button(button_row, "▲ Up", self.move_up, style="secondary").pack(side=tk.LEFT, padx=(0, UISpacing.SM))
            create_rounded_button(button_row, "▼ Down", self.move_down, style="secondary").pack(side=tk.LEFT, padx=(0, UISpacing.SM))
        create_rounded_button(button_row, "Remove", self.remove_selected, style="secondary").pack(side=tk.LEFT, padx=(0, UISpacing.SM))
        if multiple:
            create_rounded_button(button_row, "Clear", self.clear, style="danger").pack(side=tk.RIGHT)

    def _create_drop_zone(self):
        drop_frame = tk.Frame(
            self.frame,
            bg=UIColors.DROP_ZONE_BG,
            padx=UISpacing.MD,
            pady=UISpacing.MD,
            highlightbackground=UIColors.DROP_ZONE_BORDER,
            highlightthickness=2
        )
        drop_frame.pack(fill=tk.X, pady=(UISpacing.XS, UISpacing.SM))

        noun = "PDF files" if self.multiple else "a PDF file"
        main_text = f"Drag and drop {noun} here" if DND_AVAILABLE else f"Click to select {noun}"
        label = tk.Label(drop_frame, text=main_text, font=UIFonts.BODY_BOLD,
                         bg=UIColors.DROP_ZONE_BG, fg=UIColors.TEXT_PRIMARY, cursor="hand2")
        label.pack(pady=UISpacing.XS)
        sub_label = tk.Label(drop_frame, text="or click to browse", font=UIFonts.SMALL,
                             bg=UIColors.DROP_ZONE_BG, fg=UIColors.TEXT_MUTED, cursor="hand2")
        sub_label.pack()

        self._drop_zone_widgets = [drop_frame, label, sub_label]
        for widget in self._drop_zone_widgets:
            widget.bind('<Button-1>', lambda e: self.browse())

        if DND_AVAILABLE:
            drop_frame.drop_target_register(DND_FILES)
            drop_frame.dnd_bind('<<Drop>>', self.on_drop)
            drop_frame.dnd_bind('<<DragEnter>>', lambda e: self._set_drop_highlight(True))
            drop_frame.dnd_bind('<<DragLeave>>', lambda e: self._set_drop_highlight(False))

    def _set_drop_highlight(self, active):
        bg = UIColors.DROP_ZONE_ACTIVE if active else UIColors.DROP_ZONE_BG
        border = UIColors.DROP_ZONE_BORDER_ACTIVE if active else UIColors.DROP_ZONE_BORDER
        self._drop_zone_widgets[0].config(bg=bg, highlightbackground=border)
        for widget in self._drop_zone_widgets[1:]:
            widget.config(bg=bg)

    def on_drop(self, event):
        self._set_drop_highlight(False)
        paths = parse_dropped_files(event.data)
        if paths:
            self.add_paths(paths)

    def browse(self):
        filetypes = [("PDF files", "*.pdf"), ("All Files", "*.*")]
        if self.multiple:
            paths = list(filedialog.askopenfilenames(title="Select PDF files", filetypes=filetypes))
        else:
            path = filedialog.askopenfilename(title="Select a PDF file", filetypes=filetypes)
            paths = [path] if path else []
        if paths:
            self.add_paths(paths)

    def add_paths(self, paths):
        try:
            if self.multiple:
                added = self.files.add_paths(paths)
            else:
                pdf_paths = [p for p in paths if is_pdf_path(p)]
                added = []
                if pdf_paths:
                    if self.files.replace(SourceFile.from_path(pdf_paths[0])):
                        messagebox.showinfo("Replace File", "Replacing the existing file for restructuring.")
                    added = [self.files[0]]
        except OSError as e:
            logger.error(f"Could not read file: {e}")
            messagebox.showerror("File Error", f"Could not read file:\n{e}")
            return
        if not added:
            messagebox.showwarning("No PDF", "Only PDF files can be added.")
        self.refresh()

    def refresh(self, select=None):
        self.listbox.delete(0, tk.END)
        for number, source in enumerate(self.files, 1):
            size_kb = source.size / 1024
            self.listbox.insert(tk.END, f"{number}. {source.name}  ({size_kb:.0f} KB)")
        if select is not None and 0 <= select < len(self.files):
            self.listbox.selection_set(select)
        self.on_change()

    def _selected_index(self):
        selection = self.listbox.curselection()
        return selection[0] if selection else None

    def move_up(self):
        index = self._selected_index()
        if index is not None:
            self.refresh(select=self.files.move_up(index))

    def move_down(self):
        index = self._selected_index()
        if index is not None:
            self.refresh(select=self.files.move_down(index))

    def remove_selected(self):
        index = self._selected_index()
        if index is None and not self.multiple and len(self.files):
            index = 0
        if index is not None:
            self.files.remove_at(index)
            self.refresh()

    def clear(self):
        self.files.clear()
        self.refresh()

    # Drag to reorder
    def on_drag_start(self, event):
        index = self.listbox.nearest(event.y)
        self.drag_index = index if 0 <= index < len(self.files) else None

    def on_drag_motion(self, event):
        if self.drag_index is None:
            return
        target = self.listbox.nearest(event.y)
        self.listbox.selection_clear(0, tk.END)
        self.listbox.selection_set(target)

    def on_drag_end(self, event):
        if self.drag_index is None:
            return
        target = self.listbox.nearest(event.y)
        source_index = self.drag_index
        self.drag_index = None
        if 0 <= target < len(self.files) and target != source_index:
            self.files.move(source_index, target)
            self.refresh(select=target)


class GridSelector(tk.Canvas):
    """Clickable max_rows x max_columns grid; highlights the chosen shape."""

    CELL = 20
    GAP = 3

    def __init__(self, parent, rows_var, cols_var, max_rows=8, max_columns=8):
        self.rows_var = rows_var
        self.cols_var = cols_var
        self.max_rows = max_rows
        self.max_columns = max_columns
        step = self.CELL + self.GAP
        super().__init__(
            parent,
            width=max_columns * step + self.GAP,
            height=max_rows * step + self.GAP,
            bg=UIColors.BG_PRIMARY,
            highlightthickness=0,
            cursor="hand2"
        )
        self.cells = {}
        for r in range(max_rows):
            for c in range(max_columns):
                x0 = self.GAP + c * step
                y0 = self.GAP + r * step
                self.cells[(r + 1, c + 1)] = self.create_rectangle(
                    x0, y0, x0 + self.CELL, y0 + self.CELL,
                    fill=UIColors.GRID_CELL, outline=UIColors.BORDER
                )

        self.bind('<Motion>', self._on_motion)
        self.bind('<Leave>', lambda e: self.redraw())
        self.bind('<Button-1>', self._on_click)
        self.redraw()

    def _cell_at(self, x, y):
        step = self.CELL + self.GAP
        row = min(self.max_rows, max(1, int(y // step) + 1))
        col = min(self.max_columns, max(1, int(x // step) + 1))
        return row, col

    def _on_motion(self, event):
        self.redraw(hover=self._cell_at(event.x, event.y))

    def _on_click(self, event):
        rows, cols = self._cell_at(event.x, event.y)
        self.rows_var.set(rows)
        self.cols_var.set(cols)
        self.redraw()

    def redraw(self, hover=None):
        try:
            rows, cols = self.rows_var.get(), self.cols_var.get()
        except tk.TclError:
            rows, cols = 0, 0
        for (r, c), item in self.cells.items():
            if r <= rows and c <= cols:
                color = UIColors.GRID_SELECTED
            elif hover and r <= hover[0] and c <= hover[1]:
                color = UIColors.GRID_HOVER
            else:
                color = UIColors.GRID_CELL
            self.itemconfig(item, fill=color)


# ============================================================================
# GUI Application
# ============================================================================

class PDFFusionApp:
    """Main GUI application: merge, restructure, merge & restructure."""

    def __init__(self, initial_tab=MERGE, config=None):
        if DND_AVAILABLE:
            self.root = TkinterDnD.Tk()
        else:
            self.root = tk.Tk()

        self.root.title("PDF Fusion - Merge & Restructure PDFs")
        self.root.minsize(900, 700)
        self.root.resizable(True, True)

        self.config = config or get_fusion_config()
        self.position_window()

        # Per-tab inputs
        self.files = {
            MERGE: SourceFileList(),
            RESTRUCTURE: SourceFileList(),
            MERGE_RESTRUCTURE: SourceFileList(),
        }
        self.file_panels = {}
        self.action_buttons = {}
        self.progress_vars = {}
        self.tabs = {}
        self.preview_photo = None

        # Grid settings are shared by both restructure tabs
        self.rows_var = tk.IntVar(value=self.config.rows)
        self.cols_var = tk.IntVar(value=self.config.columns)
        self.orientation_var = tk.StringVar(value=self.config.orientation)
        self.grid_selectors = []
        self.rows_var.trace_add('write', self._on_grid_change)
        self.cols_var.trace_add('write', self._on_grid_change)

        self.root.columnconfigure(0, weight=1)
        self.root.rowconfigure(0, weight=1)

        self.setup_gui()
        self.select_tab(initial_tab)

    def position_window(self):
        """Position window using launcher environment variables if available."""
        try:
            if 'TOOL_WINDOW_X' in os.environ:
                x = int(os.environ.get('TOOL_WINDOW_X', 100))
                y = int(os.environ.get('TOOL_WINDOW_Y', 100))
                width = max(int(os.environ.get('TOOL_WINDOW_WIDTH', 1100)), 900)
                height = max(int(os.environ.get('TOOL_WINDOW_HEIGHT', 800)), 700)
                self.root.geometry(f"{width}x{height}+{x}+{y}")
                logger.info(f"Window positioned at {x},{y} with size {width}x{height}")
            else:
                self.root.geometry("1100x800")
        except (ValueError, TypeError) as e:
            logger.warning(f"Could not position window: {e}")
            self.root.geometry("1100x800")

    def setup_gui(self):
        """Setup the main GUI."""
        self.root.configure(bg=UIColors.BG_SECONDARY)

        main_frame = tk.Frame(self.root, bg=UIColors.BG_SECONDARY, padx=UISpacing.MD, pady=UISpacing.MD)
        main_frame.grid(row=0, column=0, sticky=(tk.W, tk.E, tk.N, tk.S))
        main_frame.columnconfigure(0, weight=1)
        main_frame.rowconfigure(1, weight=1)

        title_label = tk.Label(
            main_frame,
            text="📄 PDF Fusion",
            font=UIFonts.TITLE,
            bg=UIColors.BG_SECONDARY,
            fg=UIColors.PRIMARY
        )
        title_label.grid(row=0, column=0, pady=(0, UISpacing.MD), sticky=tk.W)

        self.notebook = ttk.Notebook(main_frame)
        self.notebook.grid(row=1, column=0, sticky=(tk.W, tk.E, tk.N, tk.S))

        self.create_merge_tab()
        self.create_restructure_tab()
        self.create_merge_restructure_tab()

        self.status_var = tk.StringVar(value="Ready - Add PDF files to begin")
        status_bar = tk.Label(
            main_frame,
            textvariable=self.status_var,
            font=UIFonts.SMALL,
            bg=UIColors.BG_TERTIARY,
            fg=UIColors.TEXT_SECONDARY,
            relief=tk.SUNKEN,
            anchor=tk.W,
            padx=UISpacing.SM,
            pady=UISpacing.XS
        )
        status_bar.grid(row=2, column=0, sticky=(tk.W, tk.E), pady=(UISpacing.MD, 0))

    def _new_tab(self, operation):
        tab = tk.Frame(self.notebook, bg=UIColors.BG_SECONDARY, padx=UISpacing.MD, pady=UISpacing.MD)
        self.notebook.add(tab, text=TAB_TITLES[operation])
        self.tabs[operation] = tab
        return tab

    def _create_action_area(self, parent, operation, label, command):
        """Progress bar and run button at the bottom of a tab."""
        self.progress_vars[operation] = tk.DoubleVar(value=0)
        ttk.Progressbar(parent, variable=self.progress_vars[operation], maximum=100).pack(
            fill=tk.X, pady=(UISpacing.MD, UISpacing.SM))
        button = create_rounded_button(parent, label, command, style="success")
        button.pack(fill=tk.X)
        button.config(state=tk.DISABLED)
        self.action_buttons[operation] = button

    def _create_layout_controls(self, parent):
        """Arrangement radio buttons plus grid picker and spinboxes."""
        layout_frame = create_card_frame(parent, "  ▦ Layout  ")

        tk.Label(layout_frame, text="Arrangement:", font=UIFonts.BODY_BOLD,
                 bg=UIColors.BG_PRIMARY, fg=UIColors.TEXT_PRIMARY).pack(anchor=tk.W)
        for value, text in ((HORIZONTAL, "Horizontal (left to right, then down)"),
                            (VERTICAL, "Vertical (top to bottom, then right)")):
            tk.Radiobutton(
                layout_frame, text=text, variable=self.orientation_var, value=value,
                font=UIFonts.SMALL, bg=UIColors.BG_PRIMARY, fg=UIColors.TEXT_PRIMARY,
                activebackground=UIColors.BG_PRIMARY, selectcolor=UIColors.BG_PRIMARY
            ).pack(anchor=tk.W)

        tk.Label(layout_frame, text="Grid size (pages per sheet):", font=UIFonts.BODY_BOLD,
                 bg=UIColors.BG_PRIMARY, fg=UIColors.TEXT_PRIMARY).pack(anchor=tk.W, pady=(UISpacing.MD, 0))

        selector = GridSelector(layout_frame, self.rows_var, self.cols_var,
                                self.config.max_rows, self.config.max_columns)
        selector.pack(anchor=tk.W, pady=UISpacing.SM)
        self.grid_selectors.append(selector)

        spin_row = tk.Frame(layout_frame, bg=UIColors.BG_PRIMARY)
        spin_row.pack(anchor=tk.W)
        tk.Label(spin_row, text="Rows", font=UIFonts.SMALL, bg=UIColors.BG_PRIMARY).pack(side=tk.LEFT)
        ttk.Spinbox(spin_row, from_=1, to=self.config.max_rows, width=4,
                    textvariable=self.rows_var).pack(side=tk.LEFT, padx=(UISpacing.SM, UISpacing.MD))
        tk.Label(spin_row, text="Columns", font=UIFonts.SMALL, bg=UIColors.BG_PRIMARY).pack(side=tk.LEFT)
        ttk.Spinbox(spin_row, from_=1, to=self.config.max_columns, width=4,
                    textvariable=self.cols_var).pack(side=tk.LEFT, padx=(UISpacing.SM, 0))

        summary = tk.Label(layout_frame, font=UIFonts.SMALL, bg=UIColors.BG_PRIMARY, fg=UIColors.TEXT_SECONDARY)
        summary.pack(anchor=tk.W, pady=(UISpacing.SM, 0))
        selector.summary_label = summary
        self._update_grid_summary()
        return layout_frame

    def create_merge_tab(self):
        tab = self._new_tab(MERGE)
        tk.Label(tab, text="Combine multiple PDF files into one document. Drag files in the list to reorder.",
                 font=UIFonts.BODY, bg=UIColors.BG_SECONDARY, fg=UIColors.TEXT_SECONDARY).pack(anchor=tk.W)

        panel = FileListPanel(tab, "  📚 Files to merge  ", self.files[MERGE],
                              on_change=lambda: self._update_buttons(MERGE))
        panel.frame.pack(fill=tk.BOTH, expand=True, pady=(UISpacing.SM, 0))
        self.file_panels[MERGE] = panel

        self._create_action_area(tab, MERGE, "🔗 Merge PDFs", self.run_merge)

    def create_restructure_tab(self):
        tab = self._new_tab(RESTRUCTURE)
        tk.Label(tab, text="Arrange the pages of a PDF onto a grid of rows and columns.",
                 font=UIFonts.BODY, bg=UIColors.BG_SECONDARY, fg=UIColors.TEXT_SECONDARY).pack(anchor=tk.W)

        body = tk.Frame(tab, bg=UIColors.BG_SECONDARY)
        body.pack(fill=tk.BOTH, expand=True, pady=(UISpacing.SM, 0))

        left = tk.Frame(body, bg=UIColors.BG_SECONDARY)
        left.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)
        panel = FileListPanel(left, "  📄 File to restructure  ", self.files[RESTRUCTURE],
                              on_change=lambda: self._update_buttons(RESTRUCTURE), multiple=False)
        panel.frame.pack(fill=tk.BOTH, expand=True)
        self.file_panels[RESTRUCTURE] = panel

        self._create_layout_controls(body).pack(side=tk.LEFT, fill=tk.Y, padx=(UISpacing.MD, 0))

        preview_frame = create_card_frame(body, "  👁 Preview  ")
        preview_frame.pack(side=tk.LEFT, fill=tk.Y, padx=(UISpacing.MD, 0))
        self.preview_label = tk.Label(preview_frame, text="No preview", font=UIFonts.SMALL,
                                      bg=UIColors.BG_PRIMARY, fg=UIColors.TEXT_MUTED, width=40, height=20)
        self.preview_label.pack()
        self.preview_btn = create_rounded_button(preview_frame, "Preview first sheet", self.show_preview, style="secondary")
        self.preview_btn.pack(fill=tk.X, pady=(UISpacing.SM, 0))
        self.preview_btn.config(state=tk.DISABLED)

        self._create_action_area(tab, RESTRUCTURE, "▦ Restructure PDF", self.run_restructure)

    def create_merge_restructure_tab(self):
        tab = self._new_tab(MERGE_RESTRUCTURE)
        tk.Label(tab, text="Merge PDF files in order, then arrange all pages onto a grid.",
                 font=UIFonts.BODY, bg=UIColors.BG_SECONDARY, fg=UIColors.TEXT_SECONDARY).pack(anchor=tk.W)

        body = tk.Frame(tab, bg=UIColors.BG_SECONDARY)
        body.pack(fill=tk.BOTH, expand=True, pady=(UISpacing.SM, 0))

        panel = FileListPanel(body, "  📚 Files to merge & restructure  ", self.files[MERGE_RESTRUCTURE],
                              on_change=lambda: self._update_buttons(MERGE_RESTRUCTURE))
        panel.frame.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)
        self.file_panels[MERGE_RESTRUCTURE] = panel

        self._create_layout_controls(body).pack(side=tk.LEFT, fill=tk.Y, padx=(UISpacing.MD, 0))

        self._create_action_area(tab, MERGE_RESTRUCTURE, "🔗 Merge & Restructure", self.run_merge_restructure)

    def select_tab(self, operation):
        if operation in self.tabs:
            self.notebook.select(self.tabs[operation])

    # ------------------------------------------------------------------
    # State helpers
    # ------------------------------------------------------------------

    def _update_buttons(self, operation):
        minimum = 2 if operation == MERGE else 1
        count = len(self.files[operation])
        button = self.action_buttons.get(operation)
        if button is not None:
            button.config(state=tk.NORMAL if count >= minimum else tk.DISABLED)
        if operation == RESTRUCTURE and hasattr(self, 'preview_btn'):
            self.preview_btn.config(state=tk.NORMAL if count else tk.DISABLED)
            self.preview_label.config(image='', text="No preview")
            self.preview_photo = None
        self.status_var.set(f"{count} file(s) selected")

    def _on_grid_change(self, *args):
        for selector in self.grid_selectors:
            selector.redraw()
        self._update_grid_summary()

    def _update_grid_summary(self):
        try:
            text = f"{self.rows_var.get()} x {self.cols_var.get()} ({self.rows_var.get() * self.cols_var.get()} pages per sheet)"
        except tk.TclError:
            text = "Invalid grid size"
        for selector in self.grid_selectors:
            if hasattr(selector, 'summary_label'):
                selector.summary_label.config(text=text)

    def current_grid(self):
        """Build a GridSpec from the controls, bounded by the configured maximum."""
        try:
            rows, cols = self.rows_var.get(), self.cols_var.get()
        except tk.TclError:
            raise ValidationError("Number of rows and columns must be at least 1.") from None
        if rows > self.config.max_rows or cols > self.config.max_columns:
            raise ValidationError(
                f"Grid size is limited to {self.config.max_rows} rows and {self.config.max_columns} columns."
            )
        return GridSpec(rows, cols, self.orientation_var.get())

    def _make_progress(self, operation, delay):
        progress_var = self.progress_vars[operation]

        def report(fraction):
            progress_var.set(fraction * 100)
            self.root.update()
            if delay:
                time.sleep(delay)

        return report

    def _ask_output_path(self, operation, original_name=None):
        filename = output_filename(operation, original_name)
        if not self.config.ask_save_location and self.config.output_dir:
            return Path(self.config.output_dir) / filename
        path = filedialog.asksaveasfilename(
            title="Save PDF",
            initialfile=filename,
            initialdir=self.config.output_dir or None,
            defaultextension=".pdf",
            filetypes=[("PDF files", "*.pdf"), ("All Files", "*.*")]
        )
        return Path(path) if path else None

    def _run_operation(self, operation, work, validate, original_name=None, delay=None):
        """Validate, ask for the output path, run `work(progress)`, save and clear inputs."""
        title = ERROR_TITLES[operation]
        try:
            validate()
        except ValidationError as e:
            messagebox.showerror(title, e.user_message)
            return

        output_path = self._ask_output_path(operation, original_name)
        if not output_path:
            return

        button = self.action_buttons[operation]
        button.config(state=tk.DISABLED)
        self.root.config(cursor="watch")
        self.progress_vars[operation].set(0)
        self.status_var.set("Processing...")
        self.root.update()

        try:
            progress = self._make_progress(operation, self.config.progress_delay if delay is None else delay)
            writer = work(progress)
            saved = save_document(writer, output_path)
        except PdfFusionError as e:
            logger.error(f"{title}: {e}")
            self.status_var.set(f"{title}: {e.user_message}")
            messagebox.showerror(title, e.user_message)
        except Exception as e:
            logger.exception(f"Unexpected error during {operation}")
            self.status_var.set(f"{title}: {e}")
            messagebox.showerror(title, str(e) or "An unexpected error occurred.")
        else:
            self.status_var.set(f"Saved {saved.name}")
            messagebox.showinfo("Success", f"{SUCCESS_MESSAGES[operation]}\n\nLocation: {saved}")
            # Successful runs consume their inputs
            self.file_panels[operation].clear()
            if self.config.open_after_save:
                open_file(saved)
        finally:
            self.root.config(cursor="")
            self.progress_vars[operation].set(0)
            self._update_buttons(operation)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def run_merge(self):
        files = self.files[MERGE]

        def validate():
            if len(files) < 2:
                raise ValidationError("Please select at least two PDF files to merge.")

        self._run_operation(MERGE, lambda progress: merge_documents(files, progress), validate)

    def run_restructure(self):
        files = self.files[RESTRUCTURE]
        grid_holder = {}

        def validate():
            if not len(files):
                raise ValidationError("Please select a PDF file to restructure.")
            grid_holder['grid'] = self.current_grid()

        self._run_operation(
            RESTRUCTURE,
            lambda progress: restructure_document(files[0], grid_holder['grid'], progress),
            validate,
            original_name=files[0].name if len(files) else None,
        )

    def run_merge_restructure(self):
        files = self.files[MERGE_RESTRUCTURE]
        grid_holder = {}

        def validate():
            if len(files) < 1:
                raise ValidationError("Please select at least one PDF file to merge and restructure.")
            grid_holder['grid'] = self.current_grid()

        self._run_operation(
            MERGE_RESTRUCTURE,
            lambda progress: merge_and_restructure(files, grid_holder['grid'], progress),
            validate,
            delay=self.config.merge_restructure_delay,
        )

    def show_preview(self):
        files = self.files[RESTRUCTURE]
        if not len(files):
            return
        try:
            image, sheets = preview_layout(files[0], self.current_grid())
        except PdfFusionError as e:
            messagebox.showerror("Preview Error", e.user_message)
            return
        except Exception as e:
            logger.exception("Preview failed")
            messagebox.showerror("Preview Error", str(e))
            return

        self.preview_photo = ImageTk.PhotoImage(image)
        self.preview_label.config(image=self.preview_photo, text="", width=image.width, height=image.height)
        self.status_var.set(f"Preview: sheet 1 of {sheets}")

    def run(self):
        """Run the application."""
        self.root.mainloop()


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(description='PDF Fusion - Merge and restructure PDF files')
    parser.add_argument('--debug', action='store_true', help='Enable debug output')
    parser.add_argument('--tool', choices=OPERATIONS, default=MERGE, help='Tab to open at startup')
    args = parser.parse_args(argv)

    log_level = logging.DEBUG if args.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    print("[INFO] Starting PDF Fusion")
    print(f"[INFO] Drag&Drop: {'Available' if DND_AVAILABLE else 'Not available'}")
    logger.debug(get_fusion_config().get_status_text())

    app = PDFFusionApp(initial_tab=args.tool)
    print("[INFO] GUI window opened")
    app.run()
    print("[INFO] PDF Fusion closed")


if __name__ == "__main__":
    main()
