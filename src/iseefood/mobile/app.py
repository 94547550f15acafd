"""
ISeeFood Kivy application - cross-platform food classification demo.

Main entry point for the Kivy-based mobile/desktop application.
"""

import logging
import os
import platform as sys_platform

# Prevent Kivy from consuming command-line arguments
os.environ["KIVY_NO_ARGS"] = "1"

from kivy.app import App
from kivy.clock import Clock
from kivy.core.window import Window
from kivy.logger import Logger
from kivy.uix.tabbedpanel import TabbedPanel, TabbedPanelItem

from ..core.capture import CaptureSession
from ..core.classifier import OpenCVModelLoader
from ..core.config import Config
from ..core.pipeline import DEFAULT_HOTDOG_TOKEN, ClassificationPipeline
from ..core.preprocessing import ImageConverter
from ..core.result import CELEBRATION_LABEL, PipelineOutcome
from ..core.state import CaptureViewModel, ProfileViewModel
from .capture_adapter import present_capture_surface
from .classification_worker import ClassificationWorker
from .screens.capture_screen import CaptureScreen
from .screens.profile_screen import ProfileScreen

logger = logging.getLogger(__name__)


class ISeeFoodApp(App):
    """
    Main ISeeFood Kivy application.

    Coordinates:
    - Capture surfaces (via present_capture_surface)
    - Classification pipeline (via ClassificationWorker)
    - Tabbed navigation between the capture and profile screens
    """

    def __init__(self, app_config: Config | None = None, **kwargs):
        """
        Initialize the ISeeFood app.

        Args:
            app_config: Optional Config object. If not provided, loads from default location.
        """
        super().__init__(**kwargs)

        # Use app_config to avoid conflict with Kivy's config
        if app_config is None:
            app_config = Config()
        self.app_config = app_config

        self.platform_type = self._detect_platform()

        # Components (initialized in build())
        self.worker = None
        self.pipeline = None
        self.capture_model = None
        self.profile_model = None
        self.capture_screen = None
        self.profile_screen = None

        self.is_running = False

        Logger.info(f"ISeeFood: Initialized on {sys_platform.system()} ({self.platform_type})")

    def _detect_platform(self) -> str:
        """Detect current platform type."""
        system = sys_platform.system()

        if system == "Linux":
            try:
                import android  # noqa: F401
                return "android"
            except ImportError:
                return "desktop"
        if system == "Darwin" and sys_platform.machine().startswith(("iPhone", "iPad")):
            return "ios"
        return "desktop"

    def build(self):
        """Build the application UI."""
        if self.platform_type == "desktop":
            Window.size = (480, 854)
        self.title = self.app_config.get("app.title", "ISeeFood")

        self.worker = ClassificationWorker(
            max_queue_size=self.app_config.get("worker.max_queue_size", 2),
        )

        self.pipeline = ClassificationPipeline(
            model_loader=OpenCVModelLoader.from_config(self.app_config),
            converter=ImageConverter(self.app_config.get("model", {}) or {}),
            dispatcher=self.worker.submit,
            publish=self._publish_outcome,
            hotdog_token=self.app_config.get("classification.hotdog_token", DEFAULT_HOTDOG_TOKEN),
            celebration_label=self.app_config.get(
                "classification.celebration_label", CELEBRATION_LABEL
            ),
        )
        Logger.info("ISeeFood: Classification pipeline initialized")

        self.capture_model = CaptureViewModel(self.pipeline)
        self.profile_model = ProfileViewModel()

        self.capture_screen = CaptureScreen(
            view_model=self.capture_model,
            present_picker=self._present_picker,
        )
        self.profile_screen = ProfileScreen(
            view_model=self.profile_model,
            greeting=self.app_config.get("profile.greeting", "Hi Flagler students!"),
            avatar=self.app_config.resolve_path("profile.avatar"),
        )

        return self._build_tabs()

    def _build_tabs(self) -> TabbedPanel:
        """Compose both screens into a bottom tab bar."""
        tabs = TabbedPanel(
            do_default_tab=False,
            tab_pos="bottom_mid",
            tab_width=200,
            background_color=(1, 1, 1, 1),
        )

        capture_tab = TabbedPanelItem(text="ISeeFood")
        capture_tab.add_widget(self.capture_screen)
        tabs.add_widget(capture_tab)

        profile_tab = TabbedPanelItem(text="Profile")
        profile_tab.add_widget(self.profile_screen)
        tabs.add_widget(profile_tab)

        tabs.default_tab = capture_tab
        Clock.schedule_once(lambda dt: tabs.switch_to(capture_tab), 0)
        return tabs

    def on_start(self):
        """Called when the application starts."""
        Logger.info("ISeeFood: Application starting")
        self.worker.start()
        self.is_running = True

    def on_stop(self):
        """Called when the application stops."""
        Logger.info("ISeeFood: Application stopping")
        self.is_running = False

        if self.worker:
            self.worker.stop()

        if self.capture_screen:
            self.capture_screen.teardown()
        if self.profile_screen:
            self.profile_screen.teardown()

        Logger.info("ISeeFood: Application stopped")

    def _present_picker(self, session: CaptureSession) -> None:
        """Open the configured capture surface."""
        source = self.app_config.get("capture.source", "camera")
        present_capture_surface(source, session, self.app_config, self.platform_type)

    def _publish_outcome(self, outcome: PipelineOutcome) -> None:
        """Handle a pipeline outcome from the worker thread."""
        if not self.is_running:
            return

        # Schedule state update on main thread
        Clock.schedule_once(lambda dt: self.capture_model.apply_outcome(outcome), 0)


def run_mobile_app(config: Config | None = None):
    """
    Run the ISeeFood Kivy application.

    Args:
        config: Optional Config object.
    """
    app = ISeeFoodApp(app_config=config)
    app.run()
