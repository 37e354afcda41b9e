"""Email/password sign-in modal screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Static


class LoginModal(ModalScreen[tuple[str, str] | None]):
    """Collect credentials for the hosted backend."""

    CSS = """
    LoginModal {
        align: center middle;
        background: $background 60%;
    }

    #login-dialog {
        width: 60;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #login-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #login-body {
        margin-bottom: 1;
        color: white;
    }

    #login-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #login-help {
        color: #dddddd;
    }
    """

    field_index = reactive(0)

    def __init__(self, error: str | None = None) -> None:
        super().__init__()
        self.email = ""
        self.password = ""
        self.error = error or ""

    def compose(self) -> ComposeResult:
        with Container(id="login-dialog"):
            yield Static("로그인", id="login-title")
            yield Static(id="login-body")
            yield Static(id="login-error")
            yield Static("Tab 필드 이동, Enter 로그인, Esc 취소", id="login-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        # Every key stays inside the modal.
        event.stop()
        event.prevent_default()

        if event.key in {"escape", "ctrl+c"}:
            self.dismiss(None)
            return

        if event.key == "enter":
            if self.email.strip() and self.password:
                self.dismiss((self.email.strip(), self.password))
                return
            self.error = "이메일과 비밀번호를 입력하세요."
        elif event.key in {"tab", "shift+tab", "down", "up"}:
            self.field_index = 1 - self.field_index
        elif event.key == "backspace":
            if self.field_index == 0:
                self.email = self.email[:-1]
            else:
                self.password = self.password[:-1]
        elif event.is_printable and event.character:
            if self.field_index == 0:
                self.email += event.character
            else:
                self.password += event.character
        self._refresh_content()

    def _refresh_content(self) -> None:
        body = Text()
        for idx, (label, shown) in enumerate((("이메일", self.email), ("비밀번호", "•" * len(self.password)))):
            if idx > 0:
                body.append("\n")
            active = idx == self.field_index
            body.append("➤ " if active else "  ")
            body.append(f"{label}: ", style="bold" if active else "")
            body.append(shown)
            if active:
                body.append("|")
        self.query_one("#login-body", Static).update(body)
        self.query_one("#login-error", Static).update(self.error)
