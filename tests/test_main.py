import io
import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from _fakes import RecordingDialogs
from core.bridge import Bridge
from core.dialogs import ConsoleDialogs, ServeDialogs, terminal_dialogs
from core.models import PresentationFault
from main import dispatch_message, handle_command, serve


class ServeTests(unittest.IsolatedAsyncioTestCase):
    async def test_invoke_returns_result_and_faults(self) -> None:
        bridge = Bridge(ServeDialogs())
        line = json.dumps({"id": 7, "method": "open-file", "params": {"filePath": "/no/such/file.rulu"}})
        reply = await dispatch_message(bridge, line)
        self.assertEqual(reply["id"], 7)
        self.assertIsNone(reply["result"])
        self.assertEqual(len(reply["faults"]), 1)
        self.assertEqual(reply["faults"][0]["kind"], "not_found")

    async def test_unknown_method(self) -> None:
        reply = await dispatch_message(Bridge(ServeDialogs()), json.dumps({"id": 1, "method": "rm-rf"}))
        self.assertEqual(reply["error"]["code"], -32601)

    async def test_bad_json_and_missing_method(self) -> None:
        bridge = Bridge(ServeDialogs())
        self.assertEqual((await dispatch_message(bridge, "{nope"))["error"]["code"], -32700)
        self.assertEqual((await dispatch_message(bridge, json.dumps({"id": 2})))["error"]["code"], -32600)

    async def test_send_pushes_notification(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            Path(tmp, "a.rulu").write_text("", encoding="utf-8")
            reply = await dispatch_message(
                Bridge(ServeDialogs()), json.dumps({"method": "get-files", "params": {"dir": tmp}})
            )
        self.assertEqual(reply["notification"], "files-list")
        self.assertEqual([e["text"] for e in reply["data"]], ["a.rulu"])

    async def test_send_outside_send_channels_is_dropped(self) -> None:
        reply = await dispatch_message(
            Bridge(ServeDialogs()), json.dumps({"method": "save-file-silent", "params": {"content": "x"}})
        )
        self.assertIsNone(reply)

    async def test_serve_answers_each_line(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            lines = "\n".join([
                json.dumps({"id": 1, "method": "save-file-silent", "params": {"content": "a", "defaultDir": tmp}}),
                "",
                json.dumps({"id": 2, "method": "open-project"}),
            ]) + "\n"
            out = io.StringIO()
            await serve(Bridge(ServeDialogs()), io.StringIO(lines), out)

            replies = {r["id"]: r for r in map(json.loads, out.getvalue().splitlines())}
            self.assertTrue(os.path.exists(os.path.join(tmp, "untitled.rulu")))
        self.assertEqual(replies[1]["result"], os.path.join(tmp, "untitled.rulu"))
        self.assertIsNone(replies[2]["result"])


    async def test_serve_prompts_go_to_the_chooser(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            Path(tmp, "a.rulu").write_text("", encoding="utf-8")
            chooser = RecordingDialogs(directory=tmp)
            lines = "\n".join([
                json.dumps({"id": 1, "method": "open-project"}),
                json.dumps({"id": 2, "method": "get-files"}),
            ]) + "\n"
            out = io.StringIO()
            await serve(Bridge(ServeDialogs()), io.StringIO(lines), out, chooser=chooser)

        replies = {r["id"]: r for r in map(json.loads, out.getvalue().splitlines())}
        self.assertEqual(replies[1]["result"], tmp)
        self.assertEqual([e["text"] for e in replies[2]["result"]], ["a.rulu"])
        self.assertEqual(chooser.directory_prompts, 2)

    async def test_save_file_in_serve_mode_writes_to_chosen_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            chosen = os.path.join(tmp, "picked.rulu")
            line = json.dumps({"id": 3, "method": "save-file", "params": {"content": "x\r\ny"}})
            reply = await dispatch_message(Bridge(ServeDialogs()), line, RecordingDialogs(save_path=chosen))
            self.assertEqual(Path(chosen).read_bytes(), b"x\r\ny")
        self.assertEqual(reply["result"], chosen)
        self.assertEqual(reply["faults"], [])


class ConsoleTests(unittest.TestCase):
    def test_get_files_command(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            os.mkdir(os.path.join(tmp, "sub"))
            Path(tmp, "a.rulu").write_text("", encoding="utf-8")
            text = handle_command(Bridge(RecordingDialogs()), f"get-files {tmp}")
        self.assertIn("D sub", text)
        self.assertIn("  a.rulu", text)

    def test_save_file_silent_command(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            source = os.path.join(tmp, "src.txt")
            Path(source).write_text("content", encoding="utf-8")
            text = handle_command(Bridge(RecordingDialogs()), f"save-file-silent {source} --dir {tmp}")
            self.assertEqual(text, os.path.join(tmp, "untitled.rulu"))
            self.assertEqual(Path(tmp, "untitled.rulu").read_text(encoding="utf-8"), "content")

    def test_unexpected_error_is_reported_not_raised(self) -> None:
        bridge = Bridge(RecordingDialogs())
        with patch.object(bridge, "handle", side_effect=TypeError("bad params")):
            text = handle_command(bridge, "get-files /tmp")
        self.assertEqual(text, "get-files failed: bad params")

    def test_unknown_and_usage(self) -> None:
        bridge = Bridge(RecordingDialogs())
        self.assertIn("Unknown request", handle_command(bridge, "format-disk"))
        self.assertIn("Usage", handle_command(bridge, "open-file"))
        self.assertIn("open-file <path>", handle_command(bridge, "help"))


class ConsoleDialogsTests(unittest.TestCase):
    def test_save_path_gets_extension_and_empty_cancels(self) -> None:
        answers = iter(["/tmp/new", ""])
        dialogs = ConsoleDialogs(ask=lambda _q: next(answers), out=io.StringIO())
        self.assertEqual(dialogs.choose_save_path("Rulu Files", ["rulu"]), "/tmp/new.rulu")
        self.assertIsNone(dialogs.choose_save_path("Rulu Files", ["rulu"]))

    def test_eof_cancels_directory(self) -> None:
        def _eof(_q):
            raise EOFError

        self.assertIsNone(ConsoleDialogs(ask=_eof, out=io.StringIO()).choose_directory())

    def test_show_error_prints(self) -> None:
        out = io.StringIO()
        ConsoleDialogs(ask=lambda _q: "", out=out).show_error(
            PresentationFault(kind="write_failed", title="Error", message="Failed to save file: disk full")
        )
        self.assertEqual(out.getvalue(), "Error: Failed to save file: disk full\n")


class TerminalDialogsTests(unittest.TestCase):
    def test_no_terminal_gives_none(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            self.assertIsNone(terminal_dialogs(os.path.join(tmp, "no-tty")))

    def test_reads_answers_and_writes_prompts(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            fake_tty = os.path.join(tmp, "tty")
            Path(fake_tty).write_text("/work/proj\n", encoding="utf-8")
            dialogs = terminal_dialogs(fake_tty)
            self.assertEqual(dialogs.choose_directory(), "/work/proj")
            dialogs._out.flush()
            self.assertIn("Directory (empty to cancel): ", Path(fake_tty).read_text(encoding="utf-8"))


if __name__ == "__main__":
    unittest.main()
