"""NiceGUI chat interface with live streaming updates."""

from functools import partial

from nicegui import ui

from studio_chat.api.app import get_http_client
from studio_chat.chat.session import ChatSession
from studio_chat.chat.transcript import Transcript, TranscriptStore
from studio_chat.client.errors import EmptyPromptError, StreamBusyError
from studio_chat.client.orchestrator import OrchestratorClient
from studio_chat.config import SettingsStore
from studio_chat.models.schemas import Role, StreamState, TranscriptEntry

CUSTOM_CSS = """
<style>
    body { background: #f4f4f5; min-height: 100vh; }

    .app-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.08);
        overflow: hidden;
    }

    .header { background: #18181b; }

    .message-user {
        background: #27272a;
        color: white;
        border-radius: 16px 16px 4px 16px;
    }

    .message-agent {
        background: #f4f4f5;
        color: #18181b;
        border-radius: 16px 16px 16px 4px;
    }

    .message-error {
        background: #fef2f2;
        color: #991b1b;
        border: 1px solid #fecaca;
        border-radius: 16px 16px 16px 4px;
    }

    .message-pinned { box-shadow: 0 0 0 1px #fb923c; }

    .typing-dot {
        width: 8px; height: 8px;
        background: #f97316;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .pinned-item {
        background: #fff7ed;
        border-left: 3px solid #fb923c;
        border-radius: 6px;
    }

    body.body--dark { background: #09090b; }
    .body--dark .app-container { background: #18181b; }
    .body--dark .message-agent { background: #27272a; color: #f4f4f5; }
    .body--dark .message-user { background: #3f3f46; }
    .body--dark .message-area { background: #111113; }
    .body--dark .input-bar { background: #18181b; border-color: #27272a; }
    .body--dark .pinned-item { background: #27272a; color: #f4f4f5; }
</style>
"""


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    settings = SettingsStore().settings
    ui.dark_mode(settings.theme == "dark")
    transcript = Transcript.load(TranscriptStore())

    messages_container: ui.column
    pinned_container: ui.column
    input_field: ui.textarea
    send_btn: ui.button
    stop_btn: ui.button
    stream_body: ui.markdown | None = None

    def render_avatar(is_user: bool) -> None:
        icon = "person" if is_user else "hub"
        color = "bg-zinc-800" if is_user else "bg-orange-500"
        with ui.element("div").classes(
            f"w-9 h-9 rounded-full flex items-center justify-center {color}"
        ):
            ui.icon(icon).classes("text-white text-lg")

    def render_entry(entry: TranscriptEntry) -> ui.markdown | None:
        is_user = entry.role is Role.USER
        align = "justify-end" if is_user else "justify-start"
        if is_user:
            bubble = "message-user"
        elif entry.is_error:
            bubble = "message-error"
        else:
            bubble = "message-agent"
        if entry.is_pinned:
            bubble += " message-pinned"

        body = None
        with ui.row().classes(f"w-full {align} gap-3 items-end"):
            if not is_user:
                render_avatar(False)
            with ui.column().classes("max-w-[75%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    if is_user:
                        ui.label(entry.content).classes("text-sm whitespace-pre-wrap")
                    else:
                        body = ui.markdown(entry.content).classes("text-sm")
                if entry.reasoning_layers and settings.show_thoughts:
                    for layer in entry.reasoning_layers:
                        with ui.expansion(layer.title, icon="psychology").classes(
                            "w-full text-xs text-zinc-500"
                        ):
                            ui.markdown(layer.content).classes("text-xs")
                with ui.row().classes("items-center gap-1"):
                    ui.label(entry.timestamp.astimezone().strftime("%I:%M %p")).classes(
                        "text-[10px] text-zinc-400"
                    )
                    if not entry.is_error:
                        ui.button(
                            icon="push_pin", on_click=partial(toggle_pin, entry.id)
                        ).props(
                            "flat dense round size=xs "
                            + ("color=orange" if entry.is_pinned else "color=grey")
                        )
            if is_user:
                render_avatar(True)
        return body

    def render_status_indicator() -> None:
        with ui.row().classes("w-full justify-start gap-3 items-end"):
            render_avatar(False)
            with ui.element("div").classes("message-agent px-4 py-3"):
                with ui.row().classes("items-center gap-2"):
                    with ui.row().classes("gap-1"):
                        for _ in range(3):
                            ui.element("div").classes("typing-dot")
                    ui.label("Thinking...").classes("text-sm text-zinc-500 italic")

    def refresh_messages() -> None:
        nonlocal stream_body
        stream_body = None
        active = session.accumulator.active_entry
        messages_container.clear()
        with messages_container:
            if len(transcript) == 0 and not session.accumulator.is_loading:
                with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                    ui.icon("forum").classes("text-5xl text-zinc-300")
                    ui.label("Start a conversation").classes("text-lg text-zinc-400")
            for entry in transcript:
                body = render_entry(entry)
                if active is not None and entry.id == active.id:
                    stream_body = body
            if session.accumulator.is_loading:
                render_status_indicator()
        refresh_pinned()

    def refresh_pinned() -> None:
        pinned_container.clear()
        with pinned_container:
            pinned = transcript.pinned()
            if not pinned:
                ui.label("No pinned messages").classes("text-sm text-zinc-400")
            for entry in pinned:
                with ui.row().classes("pinned-item w-full p-2 items-start no-wrap gap-2"):
                    ui.label(entry.content).classes("text-xs flex-grow line-clamp-4")
                    ui.button(
                        icon="close", on_click=partial(toggle_pin, entry.id)
                    ).props("flat dense round size=xs color=grey")

    def update_controls() -> None:
        idle = session.accumulator.is_idle
        send_btn.set_enabled(idle)
        stop_btn.set_visibility(not idle)

    def on_change() -> None:
        accumulator = session.accumulator
        active = accumulator.active_entry
        if (
            accumulator.state is StreamState.STREAMING
            and active is not None
            and stream_body is not None
        ):
            stream_body.set_content(active.content)
            return
        refresh_messages()
        update_controls()

    session = ChatSession(
        settings,
        transcript,
        client=OrchestratorClient(settings, get_http_client()),
        on_change=on_change,
    )

    def toggle_pin(entry_id: str) -> None:
        session.toggle_pin(entry_id)
        refresh_messages()

    async def send_message() -> None:
        text = input_field.value or ""
        input_field.value = ""
        try:
            entry = await session.submit(text)
        except EmptyPromptError:
            ui.notify("Type a message first", type="warning")
            return
        except StreamBusyError:
            input_field.value = text
            ui.notify("Wait for the current reply to finish", type="warning")
            return
        if entry is not None and entry.is_error:
            ui.notify(entry.content, type="negative")

    def stop_stream() -> None:
        session.cancel()

    def new_chat() -> None:
        try:
            session.new_chat()
        except StreamBusyError:
            ui.notify("Wait for the current reply to finish", type="warning")
            return
        refresh_messages()

    # === UI Layout ===
    with ui.right_drawer(value=False).classes("p-4") as pinned_drawer:
        ui.label("Pinned").classes("text-sm font-semibold mb-2")
        pinned_container = ui.column().classes("w-full gap-2")

    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-3xl mx-auto app-container").style(
            "height: calc(100vh - 4rem)"
        ),
    ):
        # Header
        with ui.row().classes("w-full header px-5 py-4 items-center justify-between"):
            with ui.row().classes("items-center gap-3"):
                ui.icon("hub").classes("text-orange-400 text-2xl")
                ui.label("Studio Chat").classes("text-base font-semibold text-white")
            with ui.row().classes("items-center gap-2"):
                ui.label(settings.llm_model).classes("text-xs text-white/60 font-mono")
                ui.button(icon="push_pin", on_click=pinned_drawer.toggle).props(
                    "flat round color=white"
                )
                ui.button(icon="add", on_click=new_chat).props("flat round color=white")

        # Messages
        with (
            ui.scroll_area().classes("flex-grow w-full bg-zinc-50 message-area"),
            ui.column().classes("w-full p-5"),
        ):
            messages_container = ui.column().classes("w-full gap-4")

        # Input
        with ui.row().classes("w-full p-4 gap-3 items-end bg-white border-t input-bar"):
            input_field = (
                ui.textarea(placeholder="Message the orchestrator...")
                .props("autogrow outlined dense rows=1")
                .classes("flex-grow")
                .on("keydown.enter.prevent", send_message)
            )
            stop_btn = ui.button(icon="stop", on_click=stop_stream).props(
                "round unelevated color=grey-8"
            )
            send_btn = ui.button(icon="send", on_click=send_message).props(
                "round unelevated color=orange"
            )

    refresh_messages()
    update_controls()


def main() -> None:
    ui.run(title="Studio Chat", port=8080, reload=False)


if __name__ == "__main__":
    main()
