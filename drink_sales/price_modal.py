"""Price correction modal screen."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from drink_sales.controller import parse_price
from drink_sales.errors import ValidationError


class PriceModal(ModalScreen[str | None]):
    """Prompt for a corrected price; re-prompts until the text is a whole number."""

    CSS = """
    PriceModal {
        align: center middle;
        background: $background 60%;
    }

    #price-dialog {
        width: 56;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #price-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #price-prompt {
        color: white;
        margin-bottom: 1;
    }

    #price-value {
        border: heavy $secondary;
        padding: 0 1;
        color: white;
        margin-bottom: 1;
    }

    #price-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #price-help {
        color: #dddddd;
    }
    """

    def __init__(self, menu_name: str, current_price: int) -> None:
        super().__init__()
        self.menu_name = menu_name
        self.value = str(current_price)
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="price-dialog"):
            yield Static("가격 수정", id="price-title")
            yield Static(f"{self.menu_name}: 가격을 입력하세요(숫자)", id="price-prompt")
            yield Static(id="price-value")
            yield Static(id="price-error")
            yield Static("Enter 확인, Backspace 지우기, Esc 취소", id="price-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "ctrl+c"}:
            self.dismiss(None)
            event.stop()
            return

        if event.key == "enter":
            self._confirm()
            event.stop()
            return

        if event.key == "backspace":
            if self.value:
                self.value = self.value[:-1]
                self.error = ""
                self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character:
            if len(self.value) < 9:
                self.value += event.character
            self.error = ""
            self._refresh_content()
            event.stop()

    def _confirm(self) -> None:
        try:
            parse_price(self.value)
        except ValidationError as exc:
            self.error = str(exc)
            self._refresh_content()
            return
        self.dismiss(self.value)

    def _refresh_content(self) -> None:
        self.query_one("#price-value", Static).update(self.value or "")
        self.query_one("#price-error", Static).update(self.error or "")
