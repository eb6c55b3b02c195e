"""Schema driven, externally paginated table widget.

:class:`DataTable` is a pure view: rows, paging, search text and selection
all belong to the caller, who pushes them in with the ``set_*`` methods and
listens to the signals for user intent.  The table never talks to the
network.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Callable, Iterable, Optional, Sequence

from PySide6.QtCore import QAbstractTableModel, QModelIndex, QObject, QPoint, Qt, Signal
from PySide6.QtGui import QCursor
from PySide6.QtWidgets import (
    QAbstractItemView,
    QCheckBox,
    QComboBox,
    QFrame,
    QHBoxLayout,
    QLabel,
    QMenu,
    QPushButton,
    QStackedLayout,
    QStyle,
    QTableView,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from .columns import PAGE_SIZE_OPTIONS, Column, Row, display_value, page_window, resolve_path
from .widgets import SearchLineEdit

logger = logging.getLogger(__name__)

ROW_ROLE = Qt.ItemDataRole.UserRole + 1
ACTIONS_GLYPH = "⋯"

ExtraActions = Callable[[Row], Iterable[tuple[str, Callable[[], None]]]]


class RowAction(enum.Flag):
    NONE = 0
    VIEW = enum.auto()
    EDIT = enum.auto()
    DELETE = enum.auto()


def _is_checked(value: Any) -> bool:
    if isinstance(value, Qt.CheckState):
        return value == Qt.CheckState.Checked
    try:
        return int(value) == Qt.CheckState.Checked.value
    except (TypeError, ValueError):
        return bool(value)


class CrudTableModel(QAbstractTableModel):
    """Rows of mappings rendered through :class:`Column` descriptors.

    Optional leading checkbox column and trailing actions column.  Checkbox
    edits are reported through :attr:`selectionToggled` and do not change
    the model; the owner decides and calls :meth:`set_selected_keys`.
    """

    selectionToggled = Signal(object, bool)

    def __init__(
        self,
        columns: Sequence[Column],
        key_field: str,
        *,
        selectable: bool = False,
        has_actions: bool = False,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._columns = list(columns)
        self._key_field = key_field
        self._selectable = selectable
        self._has_actions = has_actions
        self._rows: list[Row] = []
        self._selected_keys: set[Any] = set()

    # ----- layout ---------------------------------------------------------
    @property
    def columns(self) -> list[Column]:
        return list(self._columns)

    @property
    def check_column(self) -> int:
        return 0 if self._selectable else -1

    @property
    def first_data_column(self) -> int:
        return 1 if self._selectable else 0

    @property
    def actions_column(self) -> int:
        return self.columnCount() - 1 if self._has_actions else -1

    def column_for(self, section: int) -> Optional[Column]:
        offset = section - self.first_data_column
        if 0 <= offset < len(self._columns):
            return self._columns[offset]
        return None

    # ----- Qt model interface --------------------------------------------
    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:  # type: ignore[override]
        return 0 if parent.isValid() else len(self._rows)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:  # type: ignore[override]
        if parent.isValid():
            return 0
        return len(self._columns) + int(self._selectable) + int(self._has_actions)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:  # type: ignore[override]
        if not index.isValid() or not (0 <= index.row() < len(self._rows)):
            return None
        row = self._rows[index.row()]
        section = index.column()

        if role == ROW_ROLE:
            return row

        if section == self.check_column:
            if role == Qt.ItemDataRole.CheckStateRole:
                checked = self.key_of(row) in self._selected_keys
                return Qt.CheckState.Checked if checked else Qt.CheckState.Unchecked
            return None

        if section == self.actions_column:
            if role == Qt.ItemDataRole.DisplayRole:
                return ACTIONS_GLYPH
            if role == Qt.ItemDataRole.TextAlignmentRole:
                return int(Qt.AlignmentFlag.AlignCenter)
            if role == Qt.ItemDataRole.ToolTipRole:
                return "Actions"
            return None

        column = self.column_for(section)
        if column is None:
            return None
        if role == Qt.ItemDataRole.DisplayRole:
            value = display_value(column, row)
            return value if isinstance(value, str) else str(value)
        if role == Qt.ItemDataRole.ToolTipRole:
            value = resolve_path(row, column.key)
            return None if value is None else str(value)
        if role == Qt.ItemDataRole.TextAlignmentRole:
            return int(column.alignment)
        return None

    def headerData(
        self,
        section: int,
        orientation: Qt.Orientation,
        role: int = Qt.ItemDataRole.DisplayRole,
    ) -> Any:  # type: ignore[override]
        if orientation != Qt.Orientation.Horizontal or role != Qt.ItemDataRole.DisplayRole:
            return super().headerData(section, orientation, role)
        if section == self.check_column:
            return ""
        if section == self.actions_column:
            return "Actions"
        column = self.column_for(section)
        return column.header if column else None

    def flags(self, index: QModelIndex) -> Qt.ItemFlag:  # type: ignore[override]
        if not index.isValid():
            return Qt.ItemFlag.ItemIsEnabled
        base = Qt.ItemFlag.ItemIsEnabled | Qt.ItemFlag.ItemIsSelectable
        if index.column() == self.check_column:
            return base | Qt.ItemFlag.ItemIsUserCheckable
        return base

    def setData(self, index: QModelIndex, value: Any, role: int = Qt.ItemDataRole.EditRole) -> bool:  # type: ignore[override]
        if not index.isValid() or index.column() != self.check_column or role != Qt.ItemDataRole.CheckStateRole:
            return False
        self.selectionToggled.emit(self._rows[index.row()], _is_checked(value))
        return True

    # ----- state -----------------------------------------------------------
    def key_of(self, row: Row) -> Any:
        return row.get(self._key_field) if hasattr(row, "get") else None

    def set_rows(self, rows: Iterable[Row]) -> None:
        unique: list[Row] = []
        seen: set[Any] = set()
        for row in rows:
            key = self.key_of(row)
            if key in seen:
                logger.warning("duplicate %s=%r in table rows; keeping the first", self._key_field, key)
                continue
            seen.add(key)
            unique.append(row)
        self.beginResetModel()
        self._rows = unique
        self.endResetModel()

    def rows(self) -> list[Row]:
        return list(self._rows)

    def row(self, index: int) -> Optional[Row]:
        if 0 <= index < len(self._rows):
            return self._rows[index]
        return None

    def set_selected_keys(self, keys: Iterable[Any]) -> None:
        self._selected_keys = set(keys)
        if self._rows and self._selectable:
            top = self.index(0, self.check_column)
            bottom = self.index(len(self._rows) - 1, self.check_column)
            self.dataChanged.emit(top, bottom, [Qt.ItemDataRole.CheckStateRole])


class PaginationControls(QWidget):
    """Pagination footer with status text and navigation buttons."""

    pageRequested = Signal(int)
    pageSizeChanged = Signal(int)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(8)

        self.status_label = QLabel("")
        layout.addWidget(self.status_label)

        layout.addStretch(1)

        self.page_size_combo = QComboBox()
        for size in PAGE_SIZE_OPTIONS:
            self.page_size_combo.addItem(f"{size} / page", size)
        layout.addWidget(self.page_size_combo)

        self.prev_button = QToolButton()
        self.prev_button.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_ArrowBack))
        self.prev_button.setToolTip("Previous page")
        layout.addWidget(self.prev_button)

        self.page_label = QLabel("")
        layout.addWidget(self.page_label)

        self.next_button = QToolButton()
        self.next_button.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_ArrowForward))
        self.next_button.setToolTip("Next page")
        layout.addWidget(self.next_button)

        self.prev_button.clicked.connect(lambda: self.pageRequested.emit(self._current_page - 1))
        self.next_button.clicked.connect(lambda: self.pageRequested.emit(self._current_page + 1))
        self.page_size_combo.currentIndexChanged.connect(self._on_page_size_changed)

        self._current_page = 1

    def update_state(self, *, total: int, page: int, page_size: int) -> None:
        window = page_window(page, page_size, total)
        self._current_page = window.page
        self.page_size_combo.blockSignals(True)
        idx = self.page_size_combo.findData(window.page_size)
        if idx < 0:
            self.page_size_combo.addItem(f"{window.page_size} / page", window.page_size)
            idx = self.page_size_combo.count() - 1
        self.page_size_combo.setCurrentIndex(idx)
        self.page_size_combo.blockSignals(False)

        self.status_label.setText(window.summary())
        self.page_label.setText(window.page_label())
        self.prev_button.setEnabled(window.has_previous)
        self.next_button.setEnabled(window.has_next)
        self.setVisible(window.visible)

    def _on_page_size_changed(self) -> None:
        size = self.page_size_combo.currentData()
        if size:
            self.pageSizeChanged.emit(int(size))


class DataTable(QWidget):
    """Grid with toolbar, error banner, loading/empty states and pagination."""

    addRequested = Signal()
    viewRequested = Signal(object)
    editRequested = Signal(object)
    deleteRequested = Signal(object)
    bulkDeleteRequested = Signal(object)
    pageRequested = Signal(int)
    pageSizeChanged = Signal(int)
    searchChanged = Signal(str)
    selectionChanged = Signal(object)
    sortRequested = Signal(str, str)
    retryRequested = Signal()

    STATE_TABLE, STATE_LOADING, STATE_EMPTY = range(3)

    def __init__(
        self,
        columns: Sequence[Column],
        *,
        key_field: str = "id",
        actions: RowAction = RowAction.NONE,
        row_actions: ExtraActions | None = None,
        selectable: bool = False,
        searchable: bool = False,
        search_placeholder: str = "Search...",
        addable: bool = False,
        add_label: str = "Add New",
        empty_message: str = "No data found.",
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._key_field = key_field
        self._actions = actions
        self._row_actions = row_actions
        self._selectable = selectable
        self._selected_rows: list[Row] = []
        self._loading = False
        self._page = 1
        self._page_size = PAGE_SIZE_OPTIONS[0]
        self._total = 0
        self._sort: tuple[str, str] | None = None

        has_actions = bool(actions) or row_actions is not None
        self.model = CrudTableModel(
            columns,
            key_field,
            selectable=selectable,
            has_actions=has_actions,
            parent=self,
        )
        self.model.selectionToggled.connect(self._on_row_toggled)

        self._setup_ui(searchable, search_placeholder, addable, add_label, empty_message)
        self._apply_column_widths()
        self._refresh_state()

    # ----- UI construction -------------------------------------------------
    def _setup_ui(
        self,
        searchable: bool,
        search_placeholder: str,
        addable: bool,
        add_label: str,
        empty_message: str,
    ) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(8)

        toolbar = QHBoxLayout()
        self.search_edit: SearchLineEdit | None = None
        if searchable:
            self.search_edit = SearchLineEdit(search_placeholder)
            self.search_edit.textChanged.connect(self.searchChanged.emit)
            toolbar.addWidget(self.search_edit)

        self.select_all_checkbox: QCheckBox | None = None
        if self._selectable:
            self.select_all_checkbox = QCheckBox("Select all")
            self.select_all_checkbox.clicked.connect(self._on_select_all)
            toolbar.addWidget(self.select_all_checkbox)
        toolbar.addStretch(1)

        self.bulk_delete_button = QPushButton("Delete (0)")
        self.bulk_delete_button.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_TrashIcon))
        self.bulk_delete_button.clicked.connect(lambda: self.bulkDeleteRequested.emit(list(self._selected_rows)))
        self.bulk_delete_button.hide()
        toolbar.addWidget(self.bulk_delete_button)

        self.add_button: QPushButton | None = None
        if addable:
            self.add_button = QPushButton(add_label)
            self.add_button.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_FileDialogNewFolder))
            self.add_button.setCursor(Qt.CursorShape.PointingHandCursor)
            self.add_button.clicked.connect(self.addRequested.emit)
            toolbar.addWidget(self.add_button)
        layout.addLayout(toolbar)

        self.error_banner = QFrame()
        self.error_banner.setObjectName("tableErrorBanner")
        self.error_banner.setStyleSheet(
            """
            #tableErrorBanner {
                background: #fdecea;
                border-radius: 8px;
                border: 1px solid #f5c6cb;
            }
            """
        )
        error_layout = QHBoxLayout(self.error_banner)
        error_layout.setContentsMargins(12, 8, 12, 8)
        self.error_label = QLabel("")
        self.error_label.setStyleSheet("color: #b71c1c;")
        self.error_label.setWordWrap(True)
        error_layout.addWidget(self.error_label, stretch=1)
        self.retry_button = QPushButton("Retry")
        self.retry_button.clicked.connect(self.retryRequested.emit)
        error_layout.addWidget(self.retry_button)
        self.error_banner.hide()
        layout.addWidget(self.error_banner)

        self.table_view = QTableView()
        self.table_view.setModel(self.model)
        self.table_view.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.table_view.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.table_view.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.table_view.setAlternatingRowColors(True)
        self.table_view.verticalHeader().setVisible(False)
        self.table_view.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        header = self.table_view.horizontalHeader()
        header.setStretchLastSection(True)
        header.setSectionsClickable(True)
        header.sectionClicked.connect(self._on_header_clicked)
        self.table_view.clicked.connect(self._on_cell_clicked)
        self.table_view.doubleClicked.connect(self._on_double_clicked)
        self.table_view.customContextMenuRequested.connect(self._on_context_menu)

        self.loading_label = QLabel("Loading...")
        self.loading_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.empty_label = QLabel(empty_message)
        self.empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.empty_label.setStyleSheet("font-size: 14px; color: palette(Mid);")

        self.state_stack = QStackedLayout()
        self.state_stack.addWidget(self.table_view)
        self.state_stack.addWidget(self.loading_label)
        self.state_stack.addWidget(self.empty_label)
        layout.addLayout(self.state_stack, stretch=1)

        self.pagination = PaginationControls(self)
        self.pagination.pageRequested.connect(self.pageRequested.emit)
        self.pagination.pageSizeChanged.connect(self.pageSizeChanged.emit)
        layout.addWidget(self.pagination)

    def _apply_column_widths(self) -> None:
        header = self.table_view.horizontalHeader()
        if self.model.check_column >= 0:
            header.resizeSection(self.model.check_column, 36)
        for offset, column in enumerate(self.model.columns):
            if column.width:
                header.resizeSection(self.model.first_data_column + offset, column.width)
        if self.model.actions_column >= 0:
            header.resizeSection(self.model.actions_column, 70)

    # ----- state from the owner -------------------------------------------
    def set_rows(self, rows: Iterable[Row]) -> None:
        self.model.set_rows(rows)
        self.model.set_selected_keys(self.model.key_of(r) for r in self._selected_rows)
        self._refresh_state()

    def rows(self) -> list[Row]:
        return self.model.rows()

    def set_loading(self, loading: bool) -> None:
        self._loading = bool(loading)
        self._refresh_state()

    def set_error(self, message: Optional[str]) -> None:
        self.error_label.setText(message or "")
        self.error_banner.setVisible(bool(message))

    def set_pagination(self, *, page: int, page_size: int, total: int) -> None:
        self._page, self._page_size, self._total = page, page_size, total
        self.pagination.update_state(total=total, page=page, page_size=page_size)

    def set_selected_rows(self, rows: Sequence[Row]) -> None:
        self._selected_rows = list(rows)
        self.model.set_selected_keys(self.model.key_of(r) for r in self._selected_rows)
        self._refresh_selection_widgets()

    def selected_rows(self) -> list[Row]:
        return list(self._selected_rows)

    def set_search_value(self, text: str) -> None:
        if self.search_edit is None or self.search_edit.text() == text:
            return
        self.search_edit.blockSignals(True)
        self.search_edit.setText(text)
        self.search_edit.blockSignals(False)

    @property
    def has_actions_column(self) -> bool:
        return self.model.actions_column >= 0

    def current_state(self) -> int:
        return self.state_stack.currentIndex()

    def is_all_selected(self) -> bool:
        rows = self.model.rows()
        return bool(rows) and len(self._selected_rows) == len(rows)

    def _refresh_state(self) -> None:
        if self._loading:
            self.state_stack.setCurrentIndex(self.STATE_LOADING)
        elif self.model.rowCount() == 0:
            self.state_stack.setCurrentIndex(self.STATE_EMPTY)
        else:
            self.state_stack.setCurrentIndex(self.STATE_TABLE)
        self._refresh_selection_widgets()

    def _refresh_selection_widgets(self) -> None:
        if self.select_all_checkbox is not None:
            self.select_all_checkbox.setChecked(self.is_all_selected())
            self.select_all_checkbox.setEnabled(self.model.rowCount() > 0)
        count = len(self._selected_rows)
        show_bulk = self._selectable and count > 0 and bool(self._actions & RowAction.DELETE)
        self.bulk_delete_button.setText(f"Delete ({count})")
        self.bulk_delete_button.setVisible(show_bulk)

    # ----- selection -------------------------------------------------------
    def _on_select_all(self, checked: bool) -> None:
        # Only the rows on the current page are targeted.
        self.selectionChanged.emit(self.model.rows() if checked else [])

    def _on_row_toggled(self, row: Row, checked: bool) -> None:
        key = self.model.key_of(row)
        if checked:
            selection = list(self._selected_rows) + [row]
        else:
            selection = [r for r in self._selected_rows if self.model.key_of(r) != key]
        self.selectionChanged.emit(selection)

    # ----- row actions -----------------------------------------------------
    def row_menu(self, row: Row, parent: QWidget | None = None) -> QMenu:
        menu = QMenu(parent or self)
        if self._actions & RowAction.VIEW:
            menu.addAction("View").triggered.connect(lambda: self.viewRequested.emit(row))
        if self._actions & RowAction.EDIT:
            menu.addAction("Edit").triggered.connect(lambda: self.editRequested.emit(row))
        if self._row_actions is not None:
            for label, callback in self._row_actions(row):
                menu.addAction(label).triggered.connect(lambda _=False, cb=callback: cb())
        if self._actions & RowAction.DELETE:
            action = menu.addAction("Delete")
            action.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_TrashIcon))
            action.triggered.connect(lambda: self.deleteRequested.emit(row))
        return menu

    def _row_at(self, index: QModelIndex) -> Optional[Row]:
        if not index.isValid():
            return None
        return self.model.row(index.row())

    def _on_cell_clicked(self, index: QModelIndex) -> None:
        if index.column() != self.model.actions_column:
            return
        row = self._row_at(index)
        if row is None:
            return
        rect = self.table_view.visualRect(index)
        self.row_menu(row).exec(self.table_view.viewport().mapToGlobal(rect.bottomLeft()))

    def _on_context_menu(self, pos: QPoint) -> None:
        row = self._row_at(self.table_view.indexAt(pos))
        if row is None or not self.has_actions_column:
            return
        self.row_menu(row).exec(QCursor.pos())

    def _on_double_clicked(self, index: QModelIndex) -> None:
        if index.column() in (self.model.check_column, self.model.actions_column):
            return
        row = self._row_at(index)
        if row is None:
            return
        if self._actions & RowAction.VIEW:
            self.viewRequested.emit(row)
        elif self._actions & RowAction.EDIT:
            self.editRequested.emit(row)

    # ----- sorting -----------------------------------------------------------
    def _on_header_clicked(self, section: int) -> None:
        column = self.model.column_for(section)
        if column is None or not column.sortable:
            return
        order = "asc"
        if self._sort is not None and self._sort[0] == column.key and self._sort[1] == "asc":
            order = "desc"
        self._sort = (column.key, order)
        header = self.table_view.horizontalHeader()
        header.setSortIndicatorShown(True)
        header.setSortIndicator(
            section,
            Qt.SortOrder.AscendingOrder if order == "asc" else Qt.SortOrder.DescendingOrder,
        )
        self.sortRequested.emit(column.key, order)


__all__ = ["CrudTableModel", "DataTable", "PaginationControls", "ROW_ROLE", "RowAction"]
