"""Tests for the address-file readiness probe."""

from pathlib import Path

from simagent.readiness import AddressFileProbe


class TestAddressFileProbe:
    """Tests for AddressFileProbe.poll."""

    def test_no_marker_returns_none(self, tmp_path: Path) -> None:
        assert AddressFileProbe().poll(tmp_path) is None

    def test_reads_and_deletes_marker(self, tmp_path: Path) -> None:
        marker = tmp_path / "worker.address"
        marker.write_text("10.0.0.1:5701\n")

        assert AddressFileProbe().poll(tmp_path) == "10.0.0.1:5701"
        assert not marker.exists()

    def test_second_poll_finds_nothing(self, tmp_path: Path) -> None:
        (tmp_path / "worker.address").write_text("10.0.0.1:5701")
        probe = AddressFileProbe()

        assert probe.poll(tmp_path) == "10.0.0.1:5701"
        assert probe.poll(tmp_path) is None

    def test_empty_marker_is_left_for_next_poll(self, tmp_path: Path) -> None:
        marker = tmp_path / "worker.address"
        marker.write_text("")

        assert AddressFileProbe().poll(tmp_path) is None
        assert marker.exists()

    def test_custom_file_name(self, tmp_path: Path) -> None:
        (tmp_path / "ready.txt").write_text("127.0.0.1:9000")
        assert AddressFileProbe("ready.txt").poll(tmp_path) == "127.0.0.1:9000"
