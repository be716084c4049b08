"""PyQt6 front end: control group forms on the left, the comparison canvas on the right."""
from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from PyQt6.QtCore import QRectF, Qt
from PyQt6.QtGui import QColor, QGuiApplication, QPainter, QPaintEvent, QPen, QResizeEvent
from PyQt6.QtWidgets import (
    QComboBox,
    QDoubleSpinBox,
    QFormLayout,
    QFrame,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from fov_compare.client_config import ClientSettings
from fov_compare.control_group import CUSTOM_SENSOR, ControlGroup, Orientation, SensorSelection
from fov_compare.controller import FovController
from fov_compare.geometry import is_compact_width
from fov_compare.paint_commands import RectPainterAdapter, paint_rectangles
from fov_compare.sensor_presets import SensorPreset

_LOGGER = logging.getLogger("FovCompare.Window")

_MAX_MILLIMETERS = 10000.0
_DECIMALS = 6


class _QtRectPainterAdapter(RectPainterAdapter):
    def __init__(self, painter: QPainter, offset_x: float, offset_y: float) -> None:
        self._painter = painter
        self._offset_x = offset_x
        self._offset_y = offset_y

    def clear(self, width: float, height: float) -> None:
        self._painter.fillRect(QRectF(self._offset_x, self._offset_y, width, height), QColor("black"))

    def set_pen(self, color: str, *, width: float) -> None:
        q_color = QColor(color)
        if not q_color.isValid():
            q_color = QColor("white")
        pen = QPen(q_color)
        pen.setWidthF(width)
        self._painter.setPen(pen)
        self._painter.setBrush(Qt.BrushStyle.NoBrush)

    def draw_rect(self, x: float, y: float, width: float, height: float) -> None:
        self._painter.drawRect(QRectF(x + self._offset_x, y + self._offset_y, width, height))


class FovCanvas(QWidget):
    """Draws the controller's rectangles inside the largest 4:3 box that fits."""

    def __init__(self, controller: FovController, *, line_width: float, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._controller = controller
        self._line_width = line_width
        self.setMinimumSize(320, 240)

    def resizeEvent(self, event: QResizeEvent) -> None:  # noqa: N802 - Qt API
        super().resizeEvent(event)
        compact = is_compact_width(self.window().width())
        self._controller.resize(self.width(), self.height(), compact=compact)

    def paintEvent(self, event: QPaintEvent) -> None:  # noqa: N802 - Qt API
        viewport = self._controller.viewport
        offset_x = max(0.0, (self.width() - viewport.width) / 2.0)
        offset_y = max(0.0, (self.height() - viewport.height) / 2.0)
        painter = QPainter(self)
        try:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing)
            adapter = _QtRectPainterAdapter(painter, offset_x, offset_y)
            paint_rectangles(adapter, self._controller.render(), viewport, line_width=self._line_width)
        finally:
            painter.end()


class ControlGroupForm(QFrame):
    """Editing widgets for one control group; edits are forwarded, never stored."""

    def __init__(
        self,
        index: int,
        group: ControlGroup,
        catalog: Sequence[SensorPreset],
        *,
        on_edit: Callable[..., None],
        on_remove: Callable[[int], None],
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._index = index
        self._on_edit = on_edit
        self.setObjectName("controlGroup")
        self.setStyleSheet(f"QFrame#controlGroup {{ border: 3px solid {group.color or 'white'}; }}")

        self.focal_length = QDoubleSpinBox(self)
        self.focal_length.setRange(-_MAX_MILLIMETERS, _MAX_MILLIMETERS)
        self.focal_length.setDecimals(_DECIMALS)
        self.focal_length.setSuffix(" mm")

        # Python-side option lists; the combo boxes only carry labels.
        self._orientations: List[Orientation] = [Orientation.LANDSCAPE, Orientation.PORTRAIT]
        self._selections: List[SensorSelection] = [*catalog, CUSTOM_SENSOR]

        self.orientation = QComboBox(self)
        self.orientation.addItems(["Landscape", "Portrait"])

        self.sensor = QComboBox(self)
        for preset in catalog:
            self.sensor.addItem(preset.label)
        self.sensor.addItem("Custom")

        self.custom_width = QDoubleSpinBox(self)
        self.custom_height = QDoubleSpinBox(self)
        for spin in (self.custom_width, self.custom_height):
            spin.setRange(-_MAX_MILLIMETERS, _MAX_MILLIMETERS)
            spin.setDecimals(_DECIMALS)
            spin.setSuffix(" mm")
        self._custom_width_label = QLabel("Sensor width", self)
        self._custom_height_label = QLabel("Sensor height", self)

        remove_button = QPushButton("Remove", self)
        remove_button.clicked.connect(lambda: on_remove(self._index))

        layout = QFormLayout(self)
        layout.addRow("Focal length", self.focal_length)
        layout.addRow("Orientation", self.orientation)
        layout.addRow("Sensor size", self.sensor)
        layout.addRow(self._custom_width_label, self.custom_width)
        layout.addRow(self._custom_height_label, self.custom_height)
        layout.addRow(remove_button)

        self.set_values(group)
        self.focal_length.valueChanged.connect(lambda value: self._emit(focal_length=float(value)))
        self.orientation.currentIndexChanged.connect(lambda idx: self._emit(orientation=self._orientations[idx]))
        self.sensor.currentIndexChanged.connect(lambda idx: self._emit(sensor_selection=self._selections[idx]))
        self.custom_width.valueChanged.connect(lambda value: self._emit(custom_width=float(value)))
        self.custom_height.valueChanged.connect(lambda value: self._emit(custom_height=float(value)))

    @property
    def index(self) -> int:
        return self._index

    def _emit(self, **changes: object) -> None:
        self._on_edit(self._index, **changes)

    def set_values(self, group: ControlGroup) -> None:
        widgets = (self.focal_length, self.orientation, self.sensor, self.custom_width, self.custom_height)
        for widget in widgets:
            widget.blockSignals(True)
        try:
            self.focal_length.setValue(group.focal_length)
            self.orientation.setCurrentIndex(self._orientations.index(group.orientation))
            self.sensor.setCurrentIndex(self._selection_index(group))
            self.custom_width.setValue(group.custom_width)
            self.custom_height.setValue(group.custom_height)
        finally:
            for widget in widgets:
                widget.blockSignals(False)
        self.set_custom_visible(group.is_custom)

    def _selection_index(self, group: ControlGroup) -> int:
        if group.is_custom:
            return len(self._selections) - 1
        for idx, selection in enumerate(self._selections[:-1]):
            if selection == group.sensor_selection:
                return idx
        return len(self._selections) - 1

    def set_custom_visible(self, visible: bool) -> None:
        for widget in (self._custom_width_label, self.custom_width, self._custom_height_label, self.custom_height):
            widget.setVisible(visible)


class FovWindow(QMainWindow):
    def __init__(self, controller: FovController, settings: ClientSettings) -> None:
        super().__init__()
        self._controller = controller
        self._forms: List[ControlGroupForm] = []
        self._rebuild_pending = False
        self.setWindowTitle("Field of view comparison")
        self.resize(settings.window_width, settings.window_height)

        add_button = QPushButton("Add", self)
        reset_button = QPushButton("Reset", self)
        share_button = QPushButton("Share", self)
        add_button.clicked.connect(self._handle_add)
        reset_button.clicked.connect(self._handle_reset)
        share_button.clicked.connect(self._controller.share)

        buttons = QHBoxLayout()
        for button in (add_button, reset_button, share_button):
            buttons.addWidget(button)

        self._forms_container = QWidget(self)
        self._forms_layout = QVBoxLayout(self._forms_container)
        self._forms_layout.addStretch(1)
        scroll = QScrollArea(self)
        scroll.setWidgetResizable(True)
        scroll.setWidget(self._forms_container)

        sidebar = QVBoxLayout()
        sidebar.addLayout(buttons)
        sidebar.addWidget(scroll, 1)

        self.canvas = FovCanvas(controller, line_width=settings.line_width, parent=self)

        central = QWidget(self)
        root = QHBoxLayout(central)
        root.addLayout(sidebar, 0)
        root.addWidget(self.canvas, 1)
        self.setCentralWidget(central)

        controller.add_listener(self._handle_model_changed)
        self.rebuild_forms()

    @property
    def forms(self) -> List[ControlGroupForm]:
        return list(self._forms)

    def rebuild_forms(self) -> None:
        for form in self._forms:
            self._forms_layout.removeWidget(form)
            form.deleteLater()
        self._forms = []
        for index, group in enumerate(self._controller.groups):
            form = ControlGroupForm(
                index,
                group,
                self._controller.catalog,
                on_edit=self._handle_edit,
                on_remove=self._handle_remove,
                parent=self._forms_container,
            )
            self._forms_layout.insertWidget(self._forms_layout.count() - 1, form)
            self._forms.append(form)
        _LOGGER.debug("Rebuilt %d control group form(s)", len(self._forms))
        self.canvas.update()

    def _handle_model_changed(self) -> None:
        if self._rebuild_pending:
            return
        for form, visible in zip(self._forms, self._controller.custom_field_visibility()):
            form.set_custom_visible(visible)
        self.canvas.update()

    def _handle_edit(self, index: int, **changes: object) -> None:
        self._controller.update_group(index, **changes)

    def _handle_add(self) -> None:
        self._restructure(lambda: self._controller.add_group())

    def _handle_reset(self) -> None:
        self._restructure(lambda: self._controller.reset())

    def _handle_remove(self, index: int) -> None:
        self._restructure(lambda: self._controller.remove_group(index))

    def _restructure(self, action: Callable[[], object]) -> None:
        # Forms are rebuilt after the change; skip the per-form refresh in between.
        self._rebuild_pending = True
        try:
            action()
        finally:
            self._rebuild_pending = False
        self.rebuild_forms()

    def notify(self, message: str) -> None:
        QMessageBox.information(self, "Share", message)


def copy_to_clipboard(text: str) -> None:
    clipboard = QGuiApplication.clipboard()
    if clipboard is None:
        raise RuntimeError("no clipboard available")
    clipboard.setText(text)
