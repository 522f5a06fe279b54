"""
Parser for traceroute/tracert text output.

Each supported tool prints hops in its own format, so line matching is done by
a dialect object. Adding a format means adding a HopDialect subclass and
registering it in DIALECTS.
"""

import re
from typing import Dict, List, Optional

from ..schemas.traceroute import Hop, TIMEOUT_SENTINEL


class HopDialect:
    """Line matcher for one trace tool's output format."""

    name = ""

    def match(self, line: str) -> Optional[Hop]:
        """
        Parse a single output line.

        Returns:
            Hop for a recognized line, None for anything else
        """
        raise NotImplementedError


class TracerouteDialect(HopDialect):
    """
    Unix traceroute with one probe per hop::

         1  router.local (10.0.0.1)  2.345 ms
         7  *
    """

    name = "traceroute"

    LINE_PATTERN = re.compile(
        r"^\s*(\d+)\s+(?:(\S+)\s+\(([^)\s]+)\)|(\*))(?:\s+(\d+(?:\.\d+)?)\s*ms)?"
    )

    def match(self, line: str) -> Optional[Hop]:
        match = self.LINE_PATTERN.match(line)
        if not match:
            return None

        hop_number, hostname, ip, _, rtt = match.groups()
        return Hop(
            hop=int(hop_number),
            hostname=hostname or TIMEOUT_SENTINEL,
            ip=ip or TIMEOUT_SENTINEL,
            rtt=float(rtt) if rtt else None,
        )


class TracertDialect(HopDialect):
    """
    Windows tracert run with -d::

          1    <1 ms    <1 ms    <1 ms  192.168.1.1
          2     *        *        *     Request timed out.
          3    12 ms     *       14 ms  10.0.0.1
    """

    name = "tracert"

    TIMEOUT_PATTERN = re.compile(r"^\s*(\d+)\s+(?:\*\s+)+Request timed out\.?\s*$")
    HOP_PATTERN = re.compile(
        r"^\s*(\d+)\s+((?:(?:<?\d+\s*ms|\*)\s+)+)(?:(\S+)\s+\[([\d.]+)\]|([\d.]+))\s*$"
    )
    RTT_PATTERN = re.compile(r"<?(\d+)\s*ms")

    def match(self, line: str) -> Optional[Hop]:
        timeout = self.TIMEOUT_PATTERN.match(line)
        if timeout:
            return Hop(hop=int(timeout.group(1)))

        match = self.HOP_PATTERN.match(line)
        if not match:
            return None

        hop_number, probes, name, bracketed_ip, bare_ip = match.groups()
        ip = bracketed_ip or bare_ip
        # "<1 ms" is reported as 1 ms; first answering probe wins
        rtt = self.RTT_PATTERN.search(probes)
        return Hop(
            hop=int(hop_number),
            hostname=name or ip,
            ip=ip,
            rtt=float(rtt.group(1)) if rtt else None,
        )


DIALECTS: Dict[str, HopDialect] = {
    TracerouteDialect.name: TracerouteDialect(),
    TracertDialect.name: TracertDialect(),
}


def get_dialect(name: str) -> HopDialect:
    """Look up a registered dialect by name."""
    try:
        return DIALECTS[name]
    except KeyError:
        raise ValueError(
            f"Unknown trace output dialect '{name}'. Supported: {', '.join(DIALECTS)}"
        )


def parse_trace_output(
    output: str, destination_ip: str, dialect: Optional[HopDialect] = None
) -> List[Hop]:
    """
    Parse raw trace output into an ordered list of hops.

    The first non-blank line is the tool's header and is skipped. Lines the
    dialect does not recognize are skipped as well. Parsing stops at the first
    hop whose IP equals the destination, so anything printed after the target
    was reached is ignored.

    Args:
        output: Raw stdout of the trace command
        destination_ip: Resolved IPv4 address of the target
        dialect: Line matcher; defaults to unix traceroute

    Returns:
        Hops in the order they appear in the output
    """
    dialect = dialect or DIALECTS[TracerouteDialect.name]
    lines = [line for line in output.splitlines() if line.strip()]

    hops: List[Hop] = []
    for line in lines[1:]:
        hop = dialect.match(line)
        if hop is None:
            continue

        hops.append(hop)

        if hop.ip == destination_ip:
            break

    return hops
