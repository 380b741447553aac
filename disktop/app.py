from __future__ import annotations

import os
import sys
from datetime import datetime
from typing import Optional, Callable

from PySide6.QtCore import (
    Qt, QThread, Signal, QTimer, QEasingCurve, QPropertyAnimation, QSize, QDateTime
)
from PySide6.QtGui import (
    QFont, QColor, QPen, QPainter, QAction, QKeySequence
)
from PySide6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QPushButton,
    QLabel, QFileDialog, QLineEdit, QProgressBar, QMessageBox, QTabWidget,
    QTableWidget, QTableWidgetItem, QHeaderView, QAbstractItemView, QSpinBox,
    QDialog, QDialogButtonBox, QCheckBox, QComboBox, QDateTimeEdit,
    QGraphicsOpacityEffect, QMenu, QListWidget
)

from .models import ScanMode, ScanRequest, ScanResult
from .scanner import CancelFlag, scan
from .report import export
from .utils import format_size, format_timestamp, clamp, reveal_in_file_manager
from .drives import list_drives, estimate_scan_bytes

APP_NAME = "DiskTopPy"
DEFAULT_COUNT = 20
MAX_COUNT = 100000

# -------------------- Style --------------------
DARK_QSS = r"""
* { font-family: "Segoe UI"; font-size: 12px; }

QMainWindow {
    background: qlineargradient(x1:0, y1:0, x2:1, y2:1,
        stop:0 #0b0e14, stop:0.6 #0f1220, stop:1 #0b1020);
}

QWidget, QLabel { color: #dbe6ff; }

QLineEdit, QListWidget, QTableWidget, QSpinBox, QComboBox, QDateTimeEdit {
    background: #121826;
    border: 1px solid #25314a;
    border-radius: 10px;
    padding: 6px 8px;
    selection-background-color: rgba(47, 107, 255, 0.40);
    selection-color: #ffffff;
}

QPushButton {
    background: #16203a;
    border: 1px solid #2a3a5a;
    border-radius: 12px;
    padding: 8px 12px;
    color: #e7efff;
}
QPushButton:hover { background: #1a2a4c; border-color: #3a5aa8; }
QPushButton:pressed { background: #0f1930; }
QPushButton:disabled { background: #141a28; color: #6a7894; border-color: #1d2433; }

QProgressBar {
    background: #0e1320;
    border: 1px solid #26334d;
    border-radius: 10px;
    text-align: center;
    color: #cfe0ff;
    height: 18px;
}
QProgressBar::chunk {
    background: qlineargradient(x1:0,y1:0,x2:1,y2:0, stop:0 #2f6bff, stop:1 #38d1c5);
    border-radius: 10px;
}

QTabWidget::pane { border: 1px solid #26334d; border-radius: 16px; top: 0px; }
QTabBar::tab {
    background: #101624;
    border: 1px solid #26334d;
    border-bottom: none;
    padding: 8px 14px;
    border-top-left-radius: 12px;
    border-top-right-radius: 12px;
    margin-right: 4px;
    color: #bcd0ff;
}
QTabBar::tab:selected { background: #121a2d; color: #ffffff; border-color: #3a5aa8; }

QHeaderView::section {
    background: #0e1320;
    color: #9fb6ea;
    padding: 7px 8px;
    border: none;
    border-right: 1px solid #1e2a40;
}
QTableWidget { gridline-color: #1e2a40; alternate-background-color: #0f1526; }
QTableWidget::item:selected { background: rgba(47, 107, 255, 0.35); }
"""


# -------------------- Worker thread --------------------
class ScanThread(QThread):
    progress = Signal(str, int, int, object)  # path, files, dirs, bytes_scanned (may be int64)
    done = Signal(object)                      # ScanResult
    error = Signal(str)

    def __init__(self, request: ScanRequest):
        super().__init__()
        self.request = request
        self.cancel_flag = CancelFlag()

    def run(self):
        try:
            def prog(cur: str, files: int, dirs: int, bytes_scanned: int):
                self.progress.emit(cur, files, dirs, bytes_scanned)
            res = scan(self.request, progress=prog, cancel_flag=self.cancel_flag)
            self.done.emit(res)
        except Exception as e:
            self.error.emit(str(e))


# -------------------- Dialogs --------------------
class DrivePicker(QDialog):
    """Pick one mounted volume as the scan root."""
    def __init__(self, parent=None, preselected: str = ""):
        super().__init__(parent)
        self.setWindowTitle("Choose a drive")
        self.resize(640, 360)
        self.selected = preselected

        v = QVBoxLayout(self)
        hint = QLabel("Double-click a drive, or select it and press OK.")
        hint.setStyleSheet("QLabel{color:#b7c3dd;}")
        v.addWidget(hint)

        self.table = QTableWidget(0, 4)
        self.table.setHorizontalHeaderLabels(["Drive", "Total", "Used", "Free"])
        for c in range(4):
            self.table.horizontalHeader().setSectionResizeMode(c, QHeaderView.ResizeToContents)
        self.table.horizontalHeader().setSectionResizeMode(0, QHeaderView.Stretch)
        self.table.verticalHeader().setVisible(False)
        self.table.setShowGrid(False)
        self.table.setAlternatingRowColors(True)
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table.setSelectionMode(QAbstractItemView.SingleSelection)
        v.addWidget(self.table, 1)

        for d in list_drives():
            r = self.table.rowCount()
            self.table.insertRow(r)
            self.table.setItem(r, 0, QTableWidgetItem(d.mountpoint))
            self.table.setItem(r, 1, QTableWidgetItem(format_size(d.total)))
            self.table.setItem(r, 2, QTableWidgetItem(format_size(d.used)))
            self.table.setItem(r, 3, QTableWidgetItem(format_size(d.free)))
            if d.mountpoint == preselected:
                self.table.selectRow(r)

        btns = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        btns.accepted.connect(self._accept)
        btns.rejected.connect(self.reject)
        self.table.itemDoubleClicked.connect(lambda _it: self._accept())
        v.addWidget(btns)

    def _accept(self):
        row = self.table.currentRow()
        item = self.table.item(row, 0) if row >= 0 else None
        if item is None:
            return
        self.selected = item.text()
        self.accept()


# -------------------- UI helpers --------------------
class BusySpinner(QWidget):
    def __init__(self, parent=None, radius: int = 10, line_len: int = 6):
        super().__init__(parent)
        self._angle = 0
        self._timer = QTimer(self)
        self._timer.timeout.connect(self._tick)
        self._radius = radius
        self._line_len = line_len
        side = (radius + line_len + 2) * 2
        self.setFixedSize(QSize(side, side))

    def start(self):
        if not self._timer.isActive():
            self._timer.start(16)

    def stop(self):
        self._timer.stop()
        self.update()

    def _tick(self):
        self._angle = (self._angle + 30) % 360
        self.update()

    def paintEvent(self, _ev):
        p = QPainter(self)
        p.setRenderHint(QPainter.Antialiasing, True)
        c = self.rect().center()
        for i in range(12):
            alpha = int(clamp(255 - i * 18, 30, 255))
            p.setPen(QPen(QColor(56, 209, 197, alpha), 2, Qt.SolidLine, Qt.RoundCap))
            p.save()
            p.translate(c)
            p.rotate((self._angle + i * 30) % 360)
            p.drawLine(0, -self._radius, 0, -(self._radius + self._line_len))
            p.restore()


class ScanOverlay(QWidget):
    """Dimmed overlay shown while a scan runs; Esc or the button cancels it."""
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setVisible(False)
        self.setFocusPolicy(Qt.StrongFocus)
        self._cancel_cb: Optional[Callable[[], None]] = None

        self.effect = QGraphicsOpacityEffect(self)
        self.setGraphicsEffect(self.effect)
        self.effect.setOpacity(0.0)
        self.anim = QPropertyAnimation(self.effect, b"opacity", self)
        self.anim.setDuration(180)
        self.anim.setEasingCurve(QEasingCurve.OutCubic)
        self.anim.finished.connect(self._after_anim)

        self.setStyleSheet("ScanOverlay{background: rgba(6,8,14,190);} ")

        self.card = QWidget(self)
        self.card.setObjectName("overlayCard")
        self.card.setStyleSheet("""
            QWidget#overlayCard {
                background: rgba(18,24,38,0.96);
                border: 1px solid #2a3a5a;
                border-radius: 18px;
            }
        """)
        cv = QVBoxLayout(self.card)
        cv.setContentsMargins(18, 16, 18, 16)

        top = QHBoxLayout()
        self.spinner = BusySpinner(self.card)
        top.addWidget(self.spinner, 0, Qt.AlignTop)
        titles = QVBoxLayout()
        self.title = QLabel("Scanning")
        f = QFont(); f.setPointSize(13); f.setBold(True)
        self.title.setFont(f)
        self.detail = QLabel("...")
        self.detail.setStyleSheet("QLabel{color:#b7c3dd;}")
        self.detail.setWordWrap(True)
        titles.addWidget(self.title)
        titles.addWidget(self.detail)
        top.addLayout(titles, 1)
        cv.addLayout(top)

        self.prog = QProgressBar()
        self.prog.setRange(0, 100)
        cv.addWidget(self.prog)

        bottom = QHBoxLayout()
        hint = QLabel("Esc to cancel")
        hint.setStyleSheet("QLabel{color:#8ea3d6;}")
        bottom.addWidget(hint)
        bottom.addStretch(1)
        self.btn_cancel = QPushButton("Cancel")
        self.btn_cancel.clicked.connect(self._on_cancel)
        bottom.addWidget(self.btn_cancel)
        cv.addLayout(bottom)

    def start(self, detail: str, cancel_cb: Callable[[], None]):
        self._cancel_cb = cancel_cb
        self.detail.setText(detail)
        self.btn_cancel.setEnabled(True)
        self.btn_cancel.setText("Cancel")
        self.prog.setRange(0, 100)
        self.prog.setValue(0)
        self._relayout()
        self.setVisible(True)
        self.raise_()
        self.setFocus(Qt.ActiveWindowFocusReason)
        self.spinner.start()
        self._fade(1.0)

    def stop(self):
        self.spinner.stop()
        self._fade(0.0)

    def _fade(self, target: float):
        self.anim.stop()
        self.anim.setStartValue(self.effect.opacity())
        self.anim.setEndValue(target)
        self.anim.start()

    def _after_anim(self):
        if self.effect.opacity() <= 0.0:
            self.setVisible(False)

    def set_detail(self, text: str):
        self.detail.setText(text)

    def set_progress(self, value: int):
        self.prog.setValue(int(clamp(value, 0, 100)))

    def lock_cancel(self):
        self.btn_cancel.setEnabled(False)
        self.btn_cancel.setText("Cancelling...")

    def _on_cancel(self):
        self.lock_cancel()
        if self._cancel_cb:
            self._cancel_cb()

    def _relayout(self):
        if not self.parent():
            return
        pr = self.parent().rect()
        self.setGeometry(pr)
        w = min(560, max(360, pr.width() - 120))
        h = 168
        self.card.setFixedSize(w, h)
        self.card.move(max(0, (pr.width() - w) // 2), max(0, (pr.height() - h) // 2))

    def resizeEvent(self, ev):
        super().resizeEvent(ev)
        self._relayout()

    def keyPressEvent(self, ev):
        if ev.key() == Qt.Key_Escape and self.btn_cancel.isEnabled():
            self._on_cancel()
            ev.accept()
            return
        super().keyPressEvent(ev)


# -------------------- Main window --------------------
class MainWindow(QMainWindow):
    RESULT_COLUMNS = ["Size", "Path", "Created", "Accessed", "Modified"]
    PATH_COL = 1

    def __init__(self):
        super().__init__()
        self.setWindowTitle(f"{APP_NAME} - largest files and folders")
        self.resize(1200, 780)

        self.scan_thread: Optional[ScanThread] = None
        self.current_scan: Optional[ScanResult] = None
        self.total_est_bytes = 1

        central = QWidget()
        self.setCentralWidget(central)
        root = QVBoxLayout(central)
        root.setContentsMargins(12, 12, 12, 12)
        root.setSpacing(10)

        # ---------- Top controls
        top = QWidget()
        top.setObjectName("topCard")
        top.setStyleSheet("""
            QWidget#topCard {
                background: rgba(18,24,38,0.72);
                border: 1px solid #25314a;
                border-radius: 16px;
            }
        """)
        top_l = QVBoxLayout(top)
        top_l.setContentsMargins(14, 12, 14, 12)
        top_l.setSpacing(10)

        title = QLabel(APP_NAME)
        tf = QFont(); tf.setPointSize(16); tf.setBold(True)
        title.setFont(tf)
        top_l.addWidget(title)

        src_row = QHBoxLayout()
        self.path_edit = QLineEdit()
        self.path_edit.setPlaceholderText("Folder to scan...")
        btn_drive = QPushButton("Drive...")
        btn_folder = QPushButton("Folder...")
        src_row.addWidget(self.path_edit, 1)
        src_row.addWidget(btn_drive)
        src_row.addWidget(btn_folder)
        top_l.addLayout(src_row)

        opt_row = QHBoxLayout()
        self.mode_combo = QComboBox()
        self.mode_combo.addItem("Largest files", ScanMode.FILES)
        self.mode_combo.addItem("Largest folders", ScanMode.DIRECTORIES)
        self.count_spin = QSpinBox()
        self.count_spin.setRange(1, MAX_COUNT)
        self.count_spin.setValue(DEFAULT_COUNT)
        self.count_spin.setPrefix("Top ")
        self.cb_age = QCheckBox("Modified on or before")
        self.age_edit = QDateTimeEdit(QDateTime.currentDateTime().addYears(-1))
        self.age_edit.setDisplayFormat("yyyy-MM-dd HH:mm:ss")
        self.age_edit.setCalendarPopup(True)
        self.age_edit.setEnabled(False)
        btn_scan = QPushButton("Scan")
        self.btn_cancel_scan = QPushButton("Cancel")
        self.btn_cancel_scan.setEnabled(False)
        self.btn_export = QPushButton("Export report...")
        self.btn_export.setEnabled(False)

        opt_row.addWidget(self.mode_combo)
        opt_row.addWidget(self.count_spin)
        opt_row.addSpacing(6)
        opt_row.addWidget(self.cb_age)
        opt_row.addWidget(self.age_edit)
        opt_row.addStretch(1)
        opt_row.addWidget(btn_scan)
        opt_row.addWidget(self.btn_cancel_scan)
        opt_row.addWidget(self.btn_export)
        top_l.addLayout(opt_row)

        prog_row = QHBoxLayout()
        self.progress = QProgressBar()
        self.progress.setRange(0, 100)
        self.progress.setValue(0)
        self.summary = QLabel("Ready.")
        self.summary.setStyleSheet("QLabel{color:#b7c3dd;}")
        prog_row.addWidget(self.progress, 1)
        prog_row.addWidget(self.summary)
        top_l.addLayout(prog_row)
        self.scan_detail = QLabel("")
        self.scan_detail.setStyleSheet("QLabel{color:#8ea3d6;}")
        top_l.addWidget(self.scan_detail)

        root.addWidget(top)

        # ---------- Tabs
        self.tabs = QTabWidget()
        root.addWidget(self.tabs, 1)

        self.result_table = QTableWidget(0, len(self.RESULT_COLUMNS))
        self.result_table.setHorizontalHeaderLabels(self.RESULT_COLUMNS)
        self._init_table(self.result_table)
        hh = self.result_table.horizontalHeader()
        for c in range(len(self.RESULT_COLUMNS)):
            hh.setSectionResizeMode(c, QHeaderView.ResizeToContents)
        hh.setSectionResizeMode(self.PATH_COL, QHeaderView.Stretch)
        self.tabs.addTab(self.result_table, "Results")

        problems = QWidget()
        p_lay = QVBoxLayout(problems)
        p_lay.addWidget(QLabel("Access denied:"))
        self.denied_list = QListWidget()
        p_lay.addWidget(self.denied_list, 1)
        p_lay.addWidget(QLabel("Other errors:"))
        self.issue_table = QTableWidget(0, 2)
        self.issue_table.setHorizontalHeaderLabels(["Path", "Error"])
        self._init_table(self.issue_table)
        self.issue_table.horizontalHeader().setSectionResizeMode(0, QHeaderView.Stretch)
        self.issue_table.horizontalHeader().setSectionResizeMode(1, QHeaderView.Stretch)
        p_lay.addWidget(self.issue_table, 1)
        self.tab_problems = problems
        self.tabs.addTab(problems, "Access problems")

        self.overlay = ScanOverlay(central)

        # wiring
        btn_drive.clicked.connect(self.pick_drive)
        btn_folder.clicked.connect(self.pick_folder)
        btn_scan.clicked.connect(self.start_scan)
        self.path_edit.returnPressed.connect(self.start_scan)
        self.btn_cancel_scan.clicked.connect(self.cancel_scan)
        self.btn_export.clicked.connect(self.export_report)
        self.cb_age.toggled.connect(self.age_edit.setEnabled)

        self.result_table.setContextMenuPolicy(Qt.CustomContextMenu)
        self.result_table.customContextMenuRequested.connect(
            lambda pos: self._table_path_menu(self.result_table, pos, self.PATH_COL))
        self.result_table.itemDoubleClicked.connect(
            lambda it: self._reveal_path(self.result_table.item(it.row(), self.PATH_COL).text()))
        self.denied_list.itemDoubleClicked.connect(lambda it: self._reveal_path(it.text()))

        act = QAction(self)
        act.setShortcut(QKeySequence(Qt.Key_Escape))
        act.triggered.connect(self._esc_cancel)
        self.addAction(act)

        self.statusBar().showMessage("Ready.")

    # ---------- helpers
    def _esc_cancel(self):
        if self.scan_thread and self.btn_cancel_scan.isEnabled():
            self.cancel_scan()

    def _copy_text(self, text: str):
        if not text:
            return
        QApplication.clipboard().setText(text)
        self.statusBar().showMessage("Copied to clipboard")

    def _reveal_path(self, path: str):
        if not path:
            return
        if not reveal_in_file_manager(path):
            QMessageBox.warning(self, "Open", "Could not open the path in the file manager.")

    def _table_path_menu(self, table: QTableWidget, pos, path_col: int):
        item = table.itemAt(pos)
        if not item:
            return
        pitem = table.item(item.row(), path_col)
        path = pitem.text().strip() if pitem else ""
        if not path:
            return
        m = QMenu(table)
        a_open = m.addAction("Show in file manager")
        a_copy = m.addAction("Copy path")
        a_scan = m.addAction("Scan this folder") if os.path.isdir(path) else None
        act = m.exec(table.viewport().mapToGlobal(pos))
        if act == a_open:
            self._reveal_path(path)
        elif act == a_copy:
            self._copy_text(path)
        elif a_scan is not None and act == a_scan:
            self.path_edit.setText(path)
            self.statusBar().showMessage("Scan root: " + path)

    def _init_table(self, t: QTableWidget):
        t.verticalHeader().setVisible(False)
        t.setShowGrid(False)
        t.setCornerButtonEnabled(False)
        t.setAlternatingRowColors(True)
        t.setEditTriggers(QAbstractItemView.NoEditTriggers)
        t.setSelectionBehavior(QAbstractItemView.SelectRows)
        t.setSelectionMode(QAbstractItemView.SingleSelection)
        t.setTextElideMode(Qt.ElideMiddle)
        t.horizontalHeader().setHighlightSections(False)
        t.setVerticalScrollMode(QAbstractItemView.ScrollPerPixel)

    # ---------- Source selection
    def pick_drive(self):
        dlg = DrivePicker(self, preselected=self.path_edit.text().strip())
        if dlg.exec() == QDialog.Accepted and dlg.selected:
            self.path_edit.setText(dlg.selected)

    def pick_folder(self):
        start = self.path_edit.text().strip() or os.path.expanduser("~")
        path = QFileDialog.getExistingDirectory(self, "Choose a folder", start)
        if path:
            self.path_edit.setText(path)

    def build_request(self) -> ScanRequest:
        threshold = None
        if self.cb_age.isChecked():
            threshold = self.age_edit.dateTime().toSecsSinceEpoch()
        return ScanRequest(
            root=self.path_edit.text().strip(),
            mode=self.mode_combo.currentData(),
            count=int(self.count_spin.value()),
            threshold=threshold,
        )

    # ---------- Scan
    def start_scan(self):
        if self.scan_thread and self.scan_thread.isRunning():
            return
        request = self.build_request()
        if not request.root:
            QMessageBox.warning(self, "Source", "Choose a drive or a folder.")
            return
        if not os.path.isdir(request.root):
            QMessageBox.warning(self, "Not found", f"Not an existing folder: {request.root}")
            return

        self.total_est_bytes = estimate_scan_bytes(request.root) or 1
        self.progress.setValue(0)
        self.summary.setText("Scanning...")
        self.scan_detail.setText("")
        self.result_table.setRowCount(0)
        self.denied_list.clear()
        self.issue_table.setRowCount(0)
        self.current_scan = None
        self.btn_export.setEnabled(False)

        self.overlay.start("Walking the file system...", cancel_cb=self.cancel_scan)

        self.scan_thread = ScanThread(request)
        self.scan_thread.progress.connect(self.on_scan_progress)
        self.scan_thread.done.connect(self.on_scan_done)
        self.scan_thread.error.connect(self.on_scan_error)
        self.btn_cancel_scan.setEnabled(True)
        self.scan_thread.start()
        self.statusBar().showMessage("Scan started...")

    def cancel_scan(self):
        if self.scan_thread:
            self.scan_thread.cancel_flag.cancel()
            self.btn_cancel_scan.setEnabled(False)
            self.overlay.lock_cancel()
            self.statusBar().showMessage("Cancelling scan...")

    def on_scan_progress(self, cur: str, files: int, dirs: int, bytes_scanned):
        bs = int(bytes_scanned or 0)
        pct = int(clamp((bs / self.total_est_bytes) * 100.0, 0, 100))
        if pct > self.progress.value():
            self.progress.setValue(pct)
        cur_show = cur
        if len(cur_show) > 140:
            cur_show = cur_show[:60] + " ... " + cur_show[-60:]
        self.scan_detail.setText(f"Files: {files} | Folders: {dirs} | Read: {format_size(bs)} | Now: {cur_show}")
        self.overlay.set_detail(f"{format_size(bs)} - {files} files - {dirs} folders")
        self.overlay.set_progress(pct)

    def on_scan_done(self, result: ScanResult):
        self.btn_cancel_scan.setEnabled(False)
        self.progress.setValue(100)
        self.overlay.stop()
        self.current_scan = result

        state = "Cancelled, partial results." if result.cancelled else "Done."
        self.summary.setText(f"{state} {len(result.items)} shown")
        self.scan_detail.setText(
            f"Scanned: {result.total_scanned} | Files: {result.files} | Folders: {result.dirs} | "
            f"Size: {format_size(result.bytes_scanned)} | Denied: {len(result.access_denied)} | "
            f"Time: {result.elapsed_sec:.1f} s")
        self.statusBar().showMessage("Scan finished.")

        self.fill_results(result)
        self.fill_problems(result)
        self.btn_export.setEnabled(True)

    def on_scan_error(self, msg: str):
        self.btn_cancel_scan.setEnabled(False)
        self.progress.setValue(0)
        self.overlay.stop()
        QMessageBox.critical(self, "Scan failed", msg)
        self.summary.setText("Error.")
        self.statusBar().showMessage("Error.")

    def fill_results(self, result: ScanResult):
        t = self.result_table
        t.setUpdatesEnabled(False)
        t.setRowCount(0)
        for row in result.items:
            r = t.rowCount()
            t.insertRow(r)
            size_item = QTableWidgetItem(format_size(row.size))
            size_item.setData(Qt.UserRole, row.size)
            size_item.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
            path_item = QTableWidgetItem(row.path)
            path_item.setToolTip(row.path)
            t.setItem(r, 0, size_item)
            t.setItem(r, 1, path_item)
            t.setItem(r, 2, QTableWidgetItem(format_timestamp(row.created_at)))
            t.setItem(r, 3, QTableWidgetItem(format_timestamp(row.accessed_at)))
            t.setItem(r, 4, QTableWidgetItem(format_timestamp(row.modified_at)))
        t.setUpdatesEnabled(True)

    def fill_problems(self, result: ScanResult):
        self.denied_list.clear()
        self.denied_list.addItems(sorted(result.access_denied))
        self.issue_table.setRowCount(0)
        for issue in result.issues:
            r = self.issue_table.rowCount()
            self.issue_table.insertRow(r)
            self.issue_table.setItem(r, 0, QTableWidgetItem(issue.path))
            self.issue_table.setItem(r, 1, QTableWidgetItem(issue.cause))
        n = len(result.access_denied) + len(result.issues)
        self.tabs.setTabText(self.tabs.indexOf(self.tab_problems),
                             f"Access problems ({n})" if n else "Access problems")

    def export_report(self):
        if not self.current_scan:
            QMessageBox.information(self, "Export", "Nothing to export yet.")
            return
        out_dir = QFileDialog.getExistingDirectory(self, "Folder for the report", os.path.expanduser("~"))
        if not out_dir:
            return
        try:
            csv_path, log_path = export(self.current_scan, out_dir, now=datetime.now())
        except OSError as e:
            QMessageBox.critical(self, "Export", f"Could not write the report: {e}")
            return
        self.statusBar().showMessage(f"Saved: {csv_path}")
        ans = QMessageBox.question(
            self, "Export",
            f"Report saved:\n{csv_path}\n{log_path}\n\nShow it in the file manager?")
        if ans == QMessageBox.Yes:
            self._reveal_path(csv_path)


def run():
    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setStyleSheet(DARK_QSS)
    w = MainWindow()
    w.show()
    sys.exit(app.exec())
