"""Tests for platform adapters."""

from unittest.mock import patch

import psutil

from puppetcheck.check.platforms import (
    BsdPlatform,
    GenericPlatform,
    LinuxPlatform,
    detect_platform,
)


def test_detect_linux():
    assert isinstance(detect_platform("Linux"), LinuxPlatform)


def test_detect_bsd_family():
    for system in ("FreeBSD", "OpenBSD", "NetBSD", "DragonFly"):
        assert isinstance(detect_platform(system), BsdPlatform)


def test_detect_other_is_generic():
    adapter = detect_platform("Darwin")
    assert type(adapter) is GenericPlatform


@patch("puppetcheck.check.platforms.platform.system", return_value="FreeBSD")
def test_detect_uses_running_system(mock_system):
    assert isinstance(detect_platform(), BsdPlatform)


def test_default_pidfiles():
    assert LinuxPlatform().default_pidfile_path() == "/var/run/puppet/agent.pid"
    assert BsdPlatform().default_pidfile_path() == "/var/puppet/run/agent.pid"


def test_bsd_skips_command_line():
    assert BsdPlatform().process_command_line(1234) is None


@patch("puppetcheck.check.platforms.psutil.Process")
def test_linux_command_line(mock_process):
    mock_process.return_value.cmdline.return_value = ["/opt/puppetlabs/puppet/bin/ruby", "/opt/puppetlabs/puppet/bin/puppet", "agent"]
    cmdline = LinuxPlatform().process_command_line(1234)
    assert cmdline == "/opt/puppetlabs/puppet/bin/ruby /opt/puppetlabs/puppet/bin/puppet agent"
    mock_process.assert_called_once_with(1234)


@patch("puppetcheck.check.platforms.psutil.Process", side_effect=psutil.NoSuchProcess(1234))
def test_linux_command_line_vanished_process(mock_process):
    assert LinuxPlatform().process_command_line(1234) == ""
