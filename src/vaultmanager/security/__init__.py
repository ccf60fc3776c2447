import os

from contextlib import contextmanager


@contextmanager
def passphrase_fd(passphrase: str):
    """
    Yield a readable file descriptor that delivers `passphrase` to gpg --passphrase-fd.

    The passphrase travels through an anonymous pipe so it never shows up in
    argv or on disk. It must fit into the pipe buffer, which any sane
    passphrase does.
    """
    read_fd, write_fd = os.pipe()
    try:
        os.write(write_fd, passphrase.encode())
    finally:
        os.close(write_fd)

    try:
        yield read_fd
    finally:
        os.close(read_fd)


def gpg_base_cmd(fd: int) -> list:
    # --no-symkey-cache keeps gpg-agent from answering with a previously used passphrase
    return [
        "gpg", "--batch", "--yes", "--no-symkey-cache",
        "--pinentry-mode", "loopback",
        "--passphrase-fd", str(fd),
    ]
