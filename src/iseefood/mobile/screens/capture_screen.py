"""
Capture screen for ISeeFood.

Shows the captured photo and its classification label over a full-bleed
accent color. Renders DisplayState only; all decisions live in
CaptureViewModel.
"""

import logging
from typing import Callable

from kivy.graphics import Color, Rectangle
from kivy.uix.anchorlayout import AnchorLayout
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.button import Button
from kivy.uix.floatlayout import FloatLayout
from kivy.uix.label import Label

from ...core.capture import CaptureSession
from ...core.state import CaptureViewModel, DisplayState
from ..widgets.image_preview import ImagePreview

logger = logging.getLogger(__name__)


class CaptureScreen(FloatLayout):
    """
    Camera tab.

    Layout:
    ┌─────────────────────────────────────┐
    │            I See Food         (📷)  │
    │                                     │
    │          ┌──────────────┐           │
    │          │   PHOTO      │           │
    │          └──────────────┘           │
    │             Hotdog!                 │
    │                                     │
    └─────────────────────────────────────┘
    """

    def __init__(
        self,
        view_model: CaptureViewModel,
        present_picker: Callable[[CaptureSession], None],
        title: str = "I See Food",
        **kwargs,
    ):
        """
        Initialize the capture screen.

        Args:
            view_model: State owner for this screen.
            present_picker: Opens a capture surface for the given session.
            title: Navigation bar title.
        """
        super().__init__(**kwargs)

        self.view_model = view_model
        self.present_picker = present_picker
        self.title = title
        self._picker_open = False
        self._shown_image = None

        self._create_ui()

        self._unsubscribe = view_model.subscribe(self.render)
        self.render(view_model.state)

    def _create_ui(self):
        """Create all UI components."""
        with self.canvas.before:
            self._bg_color = Color(*self.view_model.state.color)
            self._bg_rect = Rectangle(pos=self.pos, size=self.size)
        self.bind(pos=self._update_background, size=self._update_background)

        # Navigation bar
        nav_bar = BoxLayout(
            orientation="horizontal",
            size_hint=(1, None),
            height=60,
            pos_hint={"x": 0, "top": 1},
            padding=[70, 8, 10, 8],
        )
        title_label = Label(
            text=self.title,
            font_size="18sp",
            bold=True,
            color=(1, 1, 1, 1),
        )
        nav_bar.add_widget(title_label)

        self.camera_button = Button(
            text="Camera",
            size_hint=(None, 1),
            width=60,
            font_size="12sp",
            color=(0, 0, 0, 1),
            background_normal="",
            background_color=(1, 1, 1, 0.8),
        )
        self.camera_button.bind(on_press=self._on_camera_press)
        nav_bar.add_widget(self.camera_button)
        self.add_widget(nav_bar)

        # Centered photo and label
        content = AnchorLayout(
            anchor_x="center",
            anchor_y="center",
            size_hint=(1, 1),
            pos_hint={"x": 0, "y": 0},
        )
        column = BoxLayout(
            orientation="vertical",
            size_hint=(None, None),
            size=(320, 240),
            spacing=20,
        )

        self.image_preview = ImagePreview(
            corner_radius=10,
            size_hint=(None, None),
            size=(240, 128),
            pos_hint={"center_x": 0.5},
            opacity=0,
        )
        column.add_widget(self.image_preview)

        self.result_label = Label(
            text="",
            font_size="18sp",
            bold=True,
            color=(1, 1, 1, 1),
            halign="center",
            valign="middle",
        )
        self.result_label.bind(size=self.result_label.setter("text_size"))
        column.add_widget(self.result_label)

        content.add_widget(column)
        self.add_widget(content)

    def _update_background(self, *args):
        self._bg_rect.pos = self.pos
        self._bg_rect.size = self.size

    def render(self, state: DisplayState) -> None:
        """
        Render a DisplayState (called on main thread).

        Args:
            state: Current display state.
        """
        self._bg_color.rgba = state.color
        self.result_label.text = state.label

        if state.image is not self._shown_image:
            self.image_preview.show(state.image)
            self._shown_image = state.image

        if state.picker_visible and not self._picker_open:
            self._picker_open = True
            self.present_picker(self.view_model.begin_capture())
        elif not state.picker_visible:
            self._picker_open = False

    def _on_camera_press(self, instance):
        """Handle camera button press."""
        logger.info("Camera button pressed")
        self.view_model.open_capture()

    def teardown(self) -> None:
        """Stop observing the view model."""
        self._unsubscribe()
