"""Platform adapters for daemon liveness checks."""

import platform

import psutil

BSD_SYSTEMS = {"FreeBSD", "OpenBSD", "NetBSD", "DragonFly"}


class GenericPlatform:
    """Fallback: Linux pidfile layout, no command-line corroboration."""

    name = "generic"
    pidfile = "/var/run/puppet/agent.pid"

    def default_pidfile_path(self) -> str:
        return self.pidfile

    def process_command_line(self, pid: int) -> str | None:
        """Return the process command line, or None where it is not checked."""
        return None


class BsdPlatform(GenericPlatform):
    name = "bsd"
    pidfile = "/var/puppet/run/agent.pid"


class LinuxPlatform(GenericPlatform):
    name = "linux"

    def process_command_line(self, pid: int) -> str | None:
        try:
            return " ".join(psutil.Process(pid).cmdline())
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            return ""


def detect_platform(system: str | None = None) -> GenericPlatform:
    """Select the adapter for the running (or given) operating system."""
    system = system or platform.system()
    if system == "Linux":
        return LinuxPlatform()
    if system in BSD_SYSTEMS:
        return BsdPlatform()
    return GenericPlatform()
