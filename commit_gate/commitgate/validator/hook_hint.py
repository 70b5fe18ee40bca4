"""Commands telling users how to install the commit-msg hook."""

from __future__ import annotations

from typing import Sequence

from commitgate.backends.base import HostKey
from commitgate.backends.urls import server_host

DEFAULT_SSH_PORT = 22

SCP_FLAG_HINT = "(for OpenSSH >= 9.0 you need to add the flag '-O' to the scp command)"


def http_hook_command(web_url: str) -> str:
    return (
        'f="$(git rev-parse --git-dir)/hooks/commit-msg"; curl -o "$f"'
        f' {web_url}tools/hooks/commit-msg ; chmod +x "$f"'
    )


def ssh_host_and_port(host_key: HostKey, web_url: str | None) -> tuple[str, int]:
    """Split a host key entry into (host, port).

    A ``*:port`` entry listens on every interface, so the host is taken from
    the canonical web URL.
    """
    host = host_key.host
    colon = host.rfind(":")
    if colon < 0:
        return host, DEFAULT_SSH_PORT
    port = int(host[colon + 1:])
    if host.startswith("*:"):
        return server_host(web_url), port
    return host[:colon], port


def commit_msg_hook_hint(
    install_command: str | None,
    host_keys: Sequence[HostKey],
    web_url: str,
    username: str | None,
) -> str:
    """Build the hook installation hint.

    A configured install command wins. Without SSH host keys the hook can
    only be fetched over HTTP(S); otherwise an scp command is offered first
    with the HTTP(S) command as a fallback.
    """
    if install_command is not None:
        return install_command

    http_hook = http_hook_command(web_url)
    if not host_keys:
        return http_hook

    ssh_host, ssh_port = ssh_host_and_port(host_keys[0], web_url)
    ssh_hook = (
        f"gitdir=$(git rev-parse --git-dir); scp -p -P {ssh_port} "
        f"{username or '<USERNAME>'}@{ssh_host}:hooks/commit-msg ${{gitdir}}/hooks/"
    )
    return f"  {ssh_hook}\n{SCP_FLAG_HINT}\nor, for http(s):\n  {http_hook}"
