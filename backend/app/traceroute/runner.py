"""
Runner for the host's DNS query and route trace commands.
"""

import logging
import platform
import re
import subprocess
from typing import List, Optional

from ..errors import ResolutionError, TraceExecutionError

logger = logging.getLogger(__name__)

# Fixed probe limits: one probe per hop keeps total runtime predictable
MAX_HOPS = 30
PROBES_PER_HOP = 1

IPV4_PATTERN = re.compile(r"^\d+\.\d+\.\d+\.\d+$")


class TraceRunner:
    """Execute DNS and traceroute commands for the current platform."""

    def __init__(self, timeout: int = 120, system: Optional[str] = None):
        """
        Initialize trace runner.

        Args:
            timeout: Maximum seconds any single command may run
            system: Platform name as returned by platform.system(); detected when omitted
        """
        self.timeout = timeout
        self.system = system or platform.system()

    @property
    def is_windows(self) -> bool:
        return self.system == "Windows"

    @property
    def dialect(self) -> str:
        """Name of the output dialect produced by this platform's trace tool."""
        return "tracert" if self.is_windows else "traceroute"

    def resolve_command(self, hostname: str) -> List[str]:
        if self.is_windows:
            return ["nslookup", hostname]
        return ["dig", "+short", hostname]

    def trace_command(self, hostname: str) -> List[str]:
        if self.is_windows:
            # -d: do not resolve hop addresses to names
            return ["tracert", "-d", "-h", str(MAX_HOPS), hostname]
        return [
            "traceroute",
            "-q",
            str(PROBES_PER_HOP),
            "-m",
            str(MAX_HOPS),
            hostname,
        ]

    def resolve(self, hostname: str) -> str:
        """
        Resolve a hostname to a single IPv4 address.

        Args:
            hostname: Hostname already validated against the allowed character set

        Returns:
            Dotted-quad IPv4 address

        Raises:
            ResolutionError: If the query returns no usable IPv4 address
            TraceExecutionError: If the DNS command cannot be run or fails
        """
        # nslookup exits nonzero for unknown names; dig +short exits 0 for NXDOMAIN,
        # so a failing dig means the query itself could not run
        output = self._run(
            self.resolve_command(hostname),
            f"DNS query for {hostname}",
            check=not self.is_windows,
        )
        candidate = self._first_address(output)

        if not candidate or not IPV4_PATTERN.match(candidate):
            raise ResolutionError(f"Could not resolve hostname '{hostname}' to IP")

        logger.info(f"Resolved {hostname} to {candidate}")
        return candidate

    def trace(self, hostname: str) -> str:
        """
        Run the route trace and return its raw output.

        Raises:
            TraceExecutionError: If the trace command is missing, fails or times out
        """
        logger.info(f"Starting traceroute to {hostname}")
        output = self._run(self.trace_command(hostname), f"Traceroute to {hostname}")
        logger.debug(f"Traceroute to {hostname} produced {len(output.splitlines())} line(s)")
        return output

    def _run(self, cmd: List[str], description: str, check: bool = True) -> str:
        try:
            result = subprocess.run(
                cmd,
                check=check,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            raise TraceExecutionError(f"{cmd[0]} not found. Please install it on the server")
        except subprocess.TimeoutExpired:
            raise TraceExecutionError(f"{description} timed out after {self.timeout}s")
        except subprocess.CalledProcessError as e:
            stderr = e.stderr.strip() if e.stderr else "No error output"
            raise TraceExecutionError(
                f"{description} failed (exit code {e.returncode}): {stderr}"
            )

        return result.stdout or ""

    def _first_address(self, output: str) -> Optional[str]:
        """Pick the first answer address out of the DNS command output."""
        lines = [line.strip() for line in output.splitlines() if line.strip()]

        if not self.is_windows:
            for line in lines:
                # dig +short lists CNAME targets (trailing dot) before addresses
                if line.endswith("."):
                    continue
                return line
            return None

        # nslookup prints the answering server first; answers follow "Name:"
        for idx, line in enumerate(lines):
            if line.startswith("Name:"):
                answers = lines[idx + 1 :]
                break
        else:
            return None

        first = None
        for line in answers:
            if line.startswith("Address"):
                line = line.split(":", 1)[1].strip()
            elif line.startswith("Aliases:"):
                break
            if first is None:
                first = line
            if IPV4_PATTERN.match(line):
                return line
        return first
