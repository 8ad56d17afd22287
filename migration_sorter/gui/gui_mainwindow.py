"""
gui_mainwindow.py - GUI Main Window

Table of migration files with grab/drop reordering, sorting, reset and
timestamp regeneration, driven by the same OrderState as the terminal loop.
"""

from pathlib import Path
from typing import Optional

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
    QLabel, QLineEdit, QPushButton, QComboBox, QTableWidget, QTableWidgetItem,
    QProgressBar, QFileDialog, QMessageBox, QHeaderView, QGroupBox, QApplication
)
from PySide6.QtCore import Qt, Slot
from PySide6.QtGui import QColor, QKeySequence, QShortcut

from ..core import (
    AlwaysConfirm, Clock, DirectoryNotFound, DirectoryUnreadable, FileSystem, OrderState,
    RegenerationEngine, RegenerationError, RegenerationPhase,
    SorterOptions, SortKey, SortDirection, apply_sort, format_modified, format_size,
    load_catalog, status_lines,
)

SORT_CHOICES = [("Name", SortKey.NAME), ("Date", SortKey.MTIME), ("Size", SortKey.SIZE)]
DIRECTION_CHOICES = [("Descending (Default)", SortDirection.DESC), ("Ascending", SortDirection.ASC)]


class QtPrompt:
    """UserPrompt backed by a message box"""

    def __init__(self, parent: Optional[QWidget] = None):
        self.parent = parent

    def confirm(self, question: str) -> bool:
        reply = QMessageBox.question(
            self.parent, "Confirm", question,
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No
        )
        return reply == QMessageBox.StandardButton.Yes


class SorterWindow(QMainWindow):
    """Main window"""

    def __init__(
        self,
        options: Optional[SorterOptions] = None,
        prompt=None,
        clock: Optional[Clock] = None,
        fs: Optional[FileSystem] = None,
    ):
        super().__init__()
        self.options = options or SorterOptions()
        if prompt is None:
            prompt = AlwaysConfirm() if self.options.assume_yes else QtPrompt(self)
        self.prompt = prompt
        self.clock = clock
        self.fs = fs
        self.state: Optional[OrderState] = None
        self.directory: Optional[Path] = None
        self.engine: Optional[RegenerationEngine] = None

        self.setWindowTitle("Migration Sorter")
        self.setMinimumSize(900, 600)

        self._init_ui()
        self._init_shortcuts()
        self._update_buttons()

    def _init_ui(self):
        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)

        # Directory group
        dir_group = QGroupBox("Migrations")
        dir_layout = QGridLayout(dir_group)

        dir_layout.addWidget(QLabel("Directory:"), 0, 0)
        self.dir_edit = QLineEdit(str(self.options.directory))
        self.dir_edit.setPlaceholderText("Select migrations directory...")
        dir_layout.addWidget(self.dir_edit, 0, 1)
        self.browse_btn = QPushButton("Browse...")
        self.browse_btn.clicked.connect(self._browse_directory)
        dir_layout.addWidget(self.browse_btn, 0, 2)

        self.load_btn = QPushButton("Load")
        self.load_btn.clicked.connect(self._do_load)
        dir_layout.addWidget(self.load_btn, 1, 0, 1, 3)

        layout.addWidget(dir_group)

        # File table
        self.table = QTableWidget()
        self.table.setColumnCount(5)
        self.table.setHorizontalHeaderLabels(["#", "Migration File Name", "Size", "Modified Date", "Status"])
        self.table.horizontalHeader().setSectionResizeMode(0, QHeaderView.ResizeMode.ResizeToContents)
        self.table.horizontalHeader().setSectionResizeMode(1, QHeaderView.ResizeMode.Stretch)
        self.table.horizontalHeader().setSectionResizeMode(2, QHeaderView.ResizeMode.ResizeToContents)
        self.table.horizontalHeader().setSectionResizeMode(3, QHeaderView.ResizeMode.ResizeToContents)
        self.table.horizontalHeader().setSectionResizeMode(4, QHeaderView.ResizeMode.ResizeToContents)
        self.table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        self.table.setSelectionMode(QTableWidget.SelectionMode.SingleSelection)
        self.table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        self.table.verticalHeader().setVisible(False)
        self.table.currentCellChanged.connect(self._on_current_cell_changed)
        layout.addWidget(self.table, 1)

        # Reorder buttons
        move_layout = QHBoxLayout()
        self.up_btn = QPushButton("Up")
        self.up_btn.clicked.connect(lambda: self.move_cursor(-1))
        self.down_btn = QPushButton("Down")
        self.down_btn.clicked.connect(lambda: self.move_cursor(1))
        self.grab_btn = QPushButton("Grab / Drop")
        self.grab_btn.clicked.connect(self.toggle_grab)
        self.cancel_btn = QPushButton("Cancel Grab")
        self.cancel_btn.clicked.connect(self.cancel_grab)
        self.reset_btn = QPushButton("Reset")
        self.reset_btn.clicked.connect(self.reset_order)
        for btn in (self.up_btn, self.down_btn, self.grab_btn, self.cancel_btn, self.reset_btn):
            move_layout.addWidget(btn)
        move_layout.addStretch()

        # Sort controls
        move_layout.addWidget(QLabel("Sort by:"))
        self.sort_combo = QComboBox()
        self.sort_combo.addItems([label for label, _ in SORT_CHOICES])
        move_layout.addWidget(self.sort_combo)
        self.direction_combo = QComboBox()
        self.direction_combo.addItems([label for label, _ in DIRECTION_CHOICES])
        move_layout.addWidget(self.direction_combo)
        self.sort_btn = QPushButton("Sort")
        self.sort_btn.clicked.connect(self._do_sort)
        move_layout.addWidget(self.sort_btn)

        layout.addLayout(move_layout)

        # Progress and execution
        bottom_layout = QHBoxLayout()

        self.progress_bar = QProgressBar()
        self.progress_bar.setVisible(False)
        bottom_layout.addWidget(self.progress_bar, 1)

        self.finish_btn = QPushButton("Finish")
        self.finish_btn.clicked.connect(self.finish)
        self.finish_btn.setStyleSheet("QPushButton { background-color: #4CAF50; color: white; font-weight: bold; padding: 8px 16px; }")
        bottom_layout.addWidget(self.finish_btn)

        layout.addLayout(bottom_layout)

        # Status label
        self.status_label = QLabel("")
        layout.addWidget(self.status_label)

        self.statusBar().showMessage("Ready")

    def _init_shortcuts(self):
        """Same keys as the terminal loop"""
        bindings = [
            (QKeySequence(Qt.Key.Key_Space), self.toggle_grab),
            (QKeySequence(Qt.Key.Key_Escape), self.cancel_grab),
            (QKeySequence(Qt.Key.Key_R), self.reset_order),
            (QKeySequence(Qt.Key.Key_N), lambda: self.sort_by_key(SortKey.NAME)),
            (QKeySequence(Qt.Key.Key_D), lambda: self.sort_by_key(SortKey.MTIME)),
            (QKeySequence(Qt.Key.Key_S), lambda: self.sort_by_key(SortKey.SIZE)),
            (QKeySequence(Qt.Key.Key_Q), self.close),
            (QKeySequence("Ctrl+Return"), self.finish),
        ]
        self.shortcuts = []
        for key, slot in bindings:
            shortcut = QShortcut(key, self)
            shortcut.activated.connect(slot)
            self.shortcuts.append(shortcut)

    def _browse_directory(self):
        """Browse and select directory"""
        directory = QFileDialog.getExistingDirectory(self, "Select Migrations Directory")
        if directory:
            self.dir_edit.setText(directory)
            self._do_load()

    def _do_load(self):
        directory = self.dir_edit.text().strip()
        if not directory:
            QMessageBox.warning(self, "Warning", "Please select a directory first")
            return
        self.load_directory(Path(directory))

    def load_directory(self, directory: Path) -> bool:
        """Load migration files; returns whether anything can be sorted"""
        try:
            entries = load_catalog(
                directory,
                extension=self.options.extension,
                recursive=self.options.recursive,
                include_hidden=self.options.include_hidden,
                fs=self.fs,
            )
        except (DirectoryNotFound, DirectoryUnreadable) as e:
            QMessageBox.warning(self, "Warning", str(e))
            return False

        self.directory = Path(directory).resolve()
        if not entries:
            self.state = None
            self.refresh()
            self.statusBar().showMessage(f"No migration files found in '{self.directory}'")
            return False

        self.state = OrderState(entries)
        self.refresh()
        self.statusBar().showMessage(f"Found {len(entries)} migration files")
        return True

    def refresh(self):
        """Redraw table and status from the state"""
        state = self.state
        self.table.blockSignals(True)
        try:
            if state is None:
                self.table.setRowCount(0)
                self.status_label.setText("")
                return

            self.table.setRowCount(len(state))
            for i, entry in enumerate(state.sequence):
                self.table.setItem(i, 0, QTableWidgetItem(str(i + 1)))
                self.table.setItem(i, 1, QTableWidgetItem(entry.name))
                self.table.setItem(i, 2, QTableWidgetItem(format_size(entry.size)))
                self.table.setItem(i, 3, QTableWidgetItem(format_modified(entry.mtime)))
                status = QTableWidgetItem("GRABBED" if i == state.held else "")
                if i == state.held:
                    status.setForeground(QColor(0, 150, 0))
                self.table.setItem(i, 4, status)

            self.table.setCurrentCell(state.cursor, 1)
            self.status_label.setText("\n".join(status_lines(state)))
        finally:
            self.table.blockSignals(False)
            self._update_buttons()

    def _update_buttons(self):
        loaded = self.state is not None
        for btn in (self.up_btn, self.down_btn, self.grab_btn, self.reset_btn, self.sort_btn, self.finish_btn):
            btn.setEnabled(loaded)
        self.cancel_btn.setEnabled(loaded and self.state.is_holding)

    @Slot(int, int, int, int)
    def _on_current_cell_changed(self, row: int, column: int, prev_row: int, prev_column: int):
        if self.state is not None and 0 <= row < len(self.state):
            self.state.cursor = row
            self.status_label.setText("\n".join(status_lines(self.state)))

    def move_cursor(self, delta: int):
        if self.state is None:
            return
        self.state.move_cursor(delta)
        self.refresh()

    def toggle_grab(self):
        if self.state is None:
            return
        moved = self.state.grab()
        self.refresh()
        if moved is None:
            self.statusBar().showMessage(f"Grabbed: {self.state.held_entry.name}")
        else:
            from_index, to_index = moved
            self.statusBar().showMessage(f"File moved from position {from_index + 1} to position {to_index + 1}!")

    def cancel_grab(self):
        if self.state is None:
            return
        if self.state.cancel_grab():
            self.statusBar().showMessage("Grab cancelled")
        self.refresh()

    def reset_order(self):
        if self.state is None:
            return
        self.state.reset()
        self.refresh()
        self.statusBar().showMessage("Order reset to original!")

    def _do_sort(self):
        _, sort_by = SORT_CHOICES[self.sort_combo.currentIndex()]
        _, direction = DIRECTION_CHOICES[self.direction_combo.currentIndex()]
        self.sort(sort_by, direction)

    def sort_by_key(self, sort_by: SortKey):
        """Sort with the direction currently selected in the combo box"""
        keys = [key for _, key in SORT_CHOICES]
        self.sort_combo.setCurrentIndex(keys.index(sort_by))
        self._do_sort()

    def sort(self, sort_by: SortKey, direction: SortDirection = SortDirection.DESC):
        if self.state is None:
            return
        message = apply_sort(self.state, sort_by, direction)
        self.refresh()
        self.statusBar().showMessage(message)

    def finish(self):
        """Confirm, back up and regenerate the timestamps in the current order"""
        if self.state is None:
            return
        if self.state.is_holding:
            self.cancel_grab()
            return

        self.engine = RegenerationEngine(
            self.directory,
            self.options.resolved_backup_root(),
            fs=self.fs,
            clock=self.clock,
            prompt=self.prompt,
            dry_run=self.options.dry_run,
            progress_callback=self._on_progress,
        )

        self.progress_bar.setVisible(True)
        self.progress_bar.setRange(0, len(self.state) * 2)
        self.progress_bar.setValue(0)
        try:
            result = self.engine.finalize(self.state.sequence)
        except RegenerationError as e:
            QMessageBox.critical(self, "Error", e.report())
            self.load_directory(self.directory)
            return
        finally:
            self.progress_bar.setVisible(False)

        if result.cancelled:
            self.statusBar().showMessage(result.summary())
            return

        QMessageBox.information(self, "Complete", result.summary())
        if not result.dry_run:
            self.load_directory(self.directory)

    def _on_progress(self, current: int, total: int, msg: str):
        # Backup fills the first half of the bar, renaming the second
        offset = total if self.engine.phase == RegenerationPhase.RENAMING else 0
        self.progress_bar.setValue(offset + current)
        self.status_label.setText(msg)
        QApplication.processEvents()
