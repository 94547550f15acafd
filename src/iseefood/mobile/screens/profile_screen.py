"""
Profile screen for ISeeFood.

Static profile card with a local, newest-first comment list.
"""

import logging
from pathlib import Path

from kivy.graphics import Color, Ellipse, Line, Rectangle, RoundedRectangle
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.button import Button
from kivy.uix.image import Image
from kivy.uix.label import Label
from kivy.uix.scrollview import ScrollView
from kivy.uix.textinput import TextInput
from kivy.uix.widget import Widget

from ...core.state import ProfileState, ProfileViewModel

logger = logging.getLogger(__name__)

BACKGROUND_COLOR = (0.75, 0.22, 0.17, 1)
RING_COLOR = (1.0, 0.84, 0.0, 1)
BUTTON_COLOR = (1.0, 0.58, 0.0, 1)
COMMENT_PREFIX = "\U0001F4AC"


class Avatar(Widget):
    """Circular avatar with a yellow ring."""

    def __init__(self, source: Path | None = None, **kwargs):
        kwargs.setdefault("size_hint", (None, None))
        kwargs.setdefault("size", (150, 150))
        super().__init__(**kwargs)

        self._image: Image | None = None
        if source is not None and source.exists():
            self._image = Image(source=str(source), fit_mode="cover", size=self.size)
            self.add_widget(self._image)
        else:
            logger.debug(f"Avatar image not found: {source}")

        with self.canvas.before:
            Color(1, 1, 1, 0.3)
            self._placeholder = Ellipse(pos=self.pos, size=self.size)
        with self.canvas.after:
            Color(*RING_COLOR)
            self._ring = Line(ellipse=(*self.pos, *self.size), width=3)

        self.bind(pos=self._update_graphics, size=self._update_graphics)

    def _update_graphics(self, *args):
        self._placeholder.pos = self.pos
        self._placeholder.size = self.size
        self._ring.ellipse = (*self.pos, *self.size)
        if self._image is not None:
            self._image.pos = self.pos
            self._image.size = self.size


class CommentItem(Label):
    """Single comment bubble."""

    def __init__(self, comment: str, **kwargs):
        kwargs.setdefault("size_hint_y", None)
        kwargs.setdefault("font_size", "15sp")
        kwargs.setdefault("color", (1, 1, 1, 1))
        kwargs.setdefault("halign", "left")
        kwargs.setdefault("valign", "middle")
        kwargs.setdefault("padding", [14, 10])
        super().__init__(text=f"{COMMENT_PREFIX} {comment}", **kwargs)

        self.bind(width=lambda *a: setattr(self, "text_size", (self.width, None)))
        self.bind(texture_size=lambda *a: setattr(self, "height", self.texture_size[1] + 20))

        with self.canvas.before:
            Color(1, 1, 1, 0.15)
            self._bg_rect = RoundedRectangle(pos=self.pos, size=self.size, radius=[10])
        self.bind(pos=self._update_background, size=self._update_background)

    def _update_background(self, *args):
        self._bg_rect.pos = self.pos
        self._bg_rect.size = self.size


class ProfileScreen(BoxLayout):
    """
    Profile tab.

    Layout:
    ┌─────────────────────────────┐
    │          ( avatar )         │
    │     Hi Flagler students!    │
    │  Comment: [______________]  │
    │  [     Post Comment     ]   │
    │  ─────────────────────────  │
    │  💬 newest                  │
    │  💬 older                   │
    └─────────────────────────────┘
    """

    def __init__(
        self,
        view_model: ProfileViewModel,
        greeting: str = "Hi Flagler students!",
        avatar: Path | None = None,
        **kwargs,
    ):
        kwargs.setdefault("orientation", "vertical")
        kwargs.setdefault("padding", [20, 20, 20, 20])
        kwargs.setdefault("spacing", 16)
        super().__init__(**kwargs)

        self.view_model = view_model
        self._rendered_comments: tuple[str, ...] = ()

        with self.canvas.before:
            Color(*BACKGROUND_COLOR)
            self._bg_rect = Rectangle(pos=self.pos, size=self.size)
        self.bind(pos=self._update_background, size=self._update_background)

        self._create_ui(greeting, avatar)

        self._unsubscribe = view_model.subscribe(self.render)
        self.render(view_model.state)

    def _create_ui(self, greeting: str, avatar: Path | None):
        """Create all UI components."""
        avatar_row = BoxLayout(size_hint=(1, None), height=160)
        avatar_row.add_widget(Widget())
        avatar_row.add_widget(Avatar(source=avatar))
        avatar_row.add_widget(Widget())
        self.add_widget(avatar_row)

        greeting_label = Label(
            text=f"[b][i][u]{greeting}[/u][/i][/b]",
            markup=True,
            font_size="22sp",
            color=(1, 1, 1, 1),
            size_hint=(1, None),
            height=40,
        )
        self.add_widget(greeting_label)

        # Comment input row
        input_row = BoxLayout(orientation="horizontal", size_hint=(1, None), height=40, spacing=10)
        input_row.add_widget(
            Label(text="Comment:", color=(1, 1, 1, 1), size_hint=(None, 1), width=90)
        )
        self.comment_input = TextInput(
            hint_text="Add your comment!",
            multiline=False,
            size_hint=(1, 1),
            padding=[10, 10, 10, 10],
        )
        self.comment_input.bind(text=self._on_text)
        self.comment_input.bind(on_text_validate=self._on_post_press)
        input_row.add_widget(self.comment_input)
        self.add_widget(input_row)

        post_btn = Button(
            text="Post Comment",
            font_size="16sp",
            size_hint=(1, None),
            height=50,
            background_normal="",
            background_color=BUTTON_COLOR,
        )
        post_btn.bind(on_press=self._on_post_press)
        self.add_widget(post_btn)

        # Divider
        divider = Widget(size_hint=(1, None), height=1)
        with divider.canvas:
            Color(1, 1, 1, 1)
            divider._line = Rectangle(pos=divider.pos, size=divider.size)
        divider.bind(
            pos=lambda w, v: setattr(w._line, "pos", v),
            size=lambda w, v: setattr(w._line, "size", v),
        )
        self.add_widget(divider)

        # Comment list
        scroll = ScrollView(size_hint=(1, 1))
        self.comment_list = BoxLayout(
            orientation="vertical",
            size_hint_y=None,
            spacing=10,
            padding=[0, 10, 0, 10],
        )
        self.comment_list.bind(minimum_height=self.comment_list.setter("height"))
        scroll.add_widget(self.comment_list)
        self.add_widget(scroll)

    def _update_background(self, *args):
        self._bg_rect.pos = self.pos
        self._bg_rect.size = self.size

    def render(self, state: ProfileState) -> None:
        """
        Render a ProfileState.

        Args:
            state: Current profile state.
        """
        if self.comment_input.text != state.draft:
            self.comment_input.text = state.draft

        if state.comments != self._rendered_comments:
            self.comment_list.clear_widgets()
            for comment in state.comments:
                self.comment_list.add_widget(CommentItem(comment))
            self._rendered_comments = state.comments

    def _on_text(self, instance, value):
        self.view_model.set_draft(value)

    def _on_post_press(self, instance):
        """Handle post button press."""
        if self.view_model.post():
            logger.info(f"Comment posted ({len(self.view_model.comments)} total)")

    def teardown(self) -> None:
        """Stop observing the view model."""
        self._unsubscribe()
