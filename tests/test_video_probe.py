import subprocess

import pytest

from services.video_probe import (
    AcceptAllProbe, FFProbeVideoProbe, VideoProbeError, is_widescreen, select_video_probe
)


@pytest.mark.parametrize("width, height, expected", [
    (1920, 1080, True),
    (1280, 720, True),
    (1366, 768, True),
    (640, 480, False),
    (1080, 1920, False),
    (1000, 1000, False),
    (0, 1080, False),
    (1920, 0, False),
])
def test_is_widescreen(width, height, expected):
    assert is_widescreen(width, height) is expected


def _fake_run(stdout="", returncode=0, stderr=""):
    def run(cmd, **kwargs):
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr=stderr)
    return run


def test_ffprobe_reads_dimensions(monkeypatch, tmp_path):
    monkeypatch.setattr("services.video_probe.subprocess.run", _fake_run("1920x1080\n"))
    probe = FFProbeVideoProbe()
    assert probe.dimensions(tmp_path / "tour.mp4") == (1920, 1080)
    assert probe.accepts(tmp_path / "tour.mp4")


def test_ffprobe_rejects_four_by_three(monkeypatch, tmp_path):
    monkeypatch.setattr("services.video_probe.subprocess.run", _fake_run("640x480\n"))
    assert not FFProbeVideoProbe().accepts(tmp_path / "old.mp4")


def test_ffprobe_rejects_file_without_video_stream(monkeypatch, tmp_path):
    monkeypatch.setattr("services.video_probe.subprocess.run", _fake_run(""))
    assert FFProbeVideoProbe().dimensions(tmp_path / "audio.mp4") is None
    assert not FFProbeVideoProbe().accepts(tmp_path / "audio.mp4")


def test_ffprobe_failure_raises_and_accept_fails_open(monkeypatch, tmp_path):
    monkeypatch.setattr("services.video_probe.subprocess.run", _fake_run(returncode=1, stderr="moov atom not found"))
    probe = FFProbeVideoProbe()
    with pytest.raises(VideoProbeError):
        probe.dimensions(tmp_path / "broken.mp4")
    assert probe.accepts(tmp_path / "broken.mp4")


def test_ffprobe_garbage_output(monkeypatch, tmp_path):
    monkeypatch.setattr("services.video_probe.subprocess.run", _fake_run("N/A\n"))
    with pytest.raises(VideoProbeError):
        FFProbeVideoProbe().dimensions(tmp_path / "odd.mp4")


def test_ffprobe_timeout(monkeypatch, tmp_path):
    def run(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, kwargs.get("timeout"))
    monkeypatch.setattr("services.video_probe.subprocess.run", run)
    with pytest.raises(VideoProbeError):
        FFProbeVideoProbe().dimensions(tmp_path / "slow.mp4")


def test_select_probe_without_ffprobe(monkeypatch):
    monkeypatch.setattr("services.video_probe.shutil.which", lambda binary: None)
    probe = select_video_probe()
    assert isinstance(probe, AcceptAllProbe)
    assert probe.accepts("anything.mp4")


def test_select_probe_with_ffprobe(monkeypatch):
    monkeypatch.setattr("services.video_probe.shutil.which", lambda binary: "/usr/bin/ffprobe")
    assert select_video_probe().name == "ffprobe"
