"""Tests for the command line and interactive front end."""

import io

import pytest

from asciify.constants import LOAD_ERROR_MESSAGE, PROCESS_ERROR_MESSAGE
from asciify.session import ConverterSession
from main import InteractiveMode, guess_format, main


@pytest.fixture
def image_path(tmp_path, png_bytes):
    path = tmp_path / 'pic.png'
    path.write_bytes(png_bytes(40, 20, (255, 0, 0)))
    return str(path)


class TestMain:
    def test_plain_to_stdout(self, image_path, capsys):
        assert main([image_path, '-w', '20']) == 0

        out = capsys.readouterr().out
        assert out == ('/' * 20 + '\n') * 10

    def test_color_format(self, image_path, capsys):
        assert main([image_path, '-w', '20', '-f', 'color']) == 0

        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 10
        assert all(line == '$x196' + '/' * 20 for line in lines)

    def test_explicit_height_without_lock(self, image_path, capsys):
        assert main([image_path, '-w', '20', '-H', '15', '--no-aspect']) == 0
        assert capsys.readouterr().out.count('\n') == 15

    def test_height_alone_drives_width(self, tmp_path, png_bytes, capsys):
        path = tmp_path / 'wide.png'
        path.write_bytes(png_bytes(200, 100, (255, 0, 0)))

        assert main([str(path), '-H', '20']) == 0

        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 20
        assert all(len(line) == 40 for line in lines)

    def test_height_alone_without_lock_keeps_default_width(self, tmp_path, png_bytes, capsys):
        path = tmp_path / 'wide.png'
        path.write_bytes(png_bytes(200, 100, (255, 0, 0)))

        assert main([str(path), '-H', '20', '--no-aspect']) == 0

        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 20
        assert all(len(line) == 80 for line in lines)

    def test_thin_image_is_recoverable(self, tmp_path, png_bytes, capsys):
        path = tmp_path / 'thin.png'
        path.write_bytes(png_bytes(1000, 10))

        assert main([str(path), '-w', '20']) == 1
        assert PROCESS_ERROR_MESSAGE in capsys.readouterr().err

    def test_html_page_to_file(self, image_path, tmp_path, capsys):
        target = tmp_path / 'art.html'

        assert main([image_path, '-w', '20', '-o', str(target), '--page']) == 0

        page = target.read_text(encoding='utf-8')
        assert page.startswith('<!DOCTYPE html>')
        assert '<span style="color: #ff0000">/</span>' in page
        assert f"Saved to {target}" in capsys.readouterr().out

    def test_ansi_to_file(self, image_path, tmp_path):
        target = tmp_path / 'art.ansi'

        assert main([image_path, '-w', '20', '-o', str(target)]) == 0
        assert '\x1b[38;5;196m' in target.read_text(encoding='utf-8')

    def test_load_error(self, tmp_path, capsys):
        assert main([str(tmp_path / 'missing.png')]) == 1
        assert LOAD_ERROR_MESSAGE in capsys.readouterr().err

    def test_width_out_of_range(self, image_path):
        with pytest.raises(SystemExit) as excinfo:
            main([image_path, '-w', '500'])
        assert excinfo.value.code == 2

    def test_no_input_prints_help(self, capsys):
        assert main([]) == 2
        assert 'usage' in capsys.readouterr().out


class TestGuessFormat:
    @pytest.mark.parametrize("path, fmt", [
        ('out.txt', 'plain'),
        ('out.HTML', 'html'),
        ('out.htm', 'html'),
        ('out.ansi', 'ansi'),
        ('out', 'plain'),
    ])
    def test_extensions(self, path, fmt):
        assert guess_format(path) == fmt


class TestInteractiveMode:
    def _run(self, commands, source=None):
        stdout = io.StringIO()
        mode = InteractiveMode(ConverterSession(width=20),
                               stdin=io.StringIO(commands), stdout=stdout)
        mode.run(source)
        return mode, stdout.getvalue()

    def test_load_adjust_and_show(self, image_path):
        mode, out = self._run("w 30\nconvert\nshow plain\nq\n", source=image_path)

        assert 'Converted to 20x10' in out
        assert 'width=30 height=15 aspect lock=on' in out
        assert 'Converted to 30x15' in out
        assert ('/' * 30 + '\n') * 15 in out
        assert mode.session.outputs.height == 15

    def test_lock_toggle(self, image_path):
        mode, out = self._run("lock\nh 12\nq\n", source=image_path)

        assert 'aspect lock=off' in out
        assert (mode.session.width, mode.session.height) == (20, 12)

    def test_invalid_value_reported(self):
        mode, out = self._run("w 5\nq\n")
        assert 'Error: width must be between 20 and 200, got 5' in out

    def test_convert_without_image(self):
        _, out = self._run("convert\n")
        assert 'No image loaded.' in out

    def test_save(self, image_path, tmp_path):
        target = tmp_path / 'art.txt'
        self._run(f"save color {target}\nq\n", source=image_path)
        assert target.read_text(encoding='utf-8').startswith('$x196')

    def test_thin_image_on_start_does_not_crash(self, tmp_path, png_bytes):
        path = tmp_path / 'thin.png'
        path.write_bytes(png_bytes(1000, 10))

        mode, out = self._run("w 30\nq\n", source=str(path))

        assert PROCESS_ERROR_MESSAGE in out
        assert mode.session.outputs is None

    def test_show_html_ends_with_newline(self, image_path):
        _, out = self._run("show html\nq\n", source=image_path)
        assert '<br>\n> ' in out

    def test_interrupt_keeps_prompt_running(self):
        class InterruptOnce(io.StringIO):
            interrupted = False

            def readline(self, *args):
                if not self.interrupted:
                    self.interrupted = True
                    raise KeyboardInterrupt
                return super().readline(*args)

        stdout = io.StringIO()
        InteractiveMode(ConverterSession(width=20),
                        stdin=InterruptOnce("q\n"), stdout=stdout).run()

        assert "Use 'q' to quit." in stdout.getvalue()

    def test_load_error_reported(self, tmp_path):
        _, out = self._run(f"load {tmp_path / 'nope.png'}\nq\n")
        assert LOAD_ERROR_MESSAGE in out
