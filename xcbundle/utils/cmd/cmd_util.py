#
# Copyright 2024 zhlinh and ccgo Project Authors. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found at
#
# https://opensource.org/license/MIT
#
# The above copyright notice and this permission
# notice shall be included in all copies or
# substantial portions of the Software.

import subprocess
import time
from threading import Timer

DEFAULT_TIMEOUT_SECOND = 10
# xcodebuild archives of large schemes can take a long time
LONG_TIMEOUT_SECOND = 3 * 3600
COMMAND_NOT_FOUND_CODE = 127


def decode_bytes(input: bytes) -> str:
    if not input:
        return ""
    try:
        return bytes.decode(input, "UTF-8")
    except UnicodeDecodeError:
        return bytes.decode(input, "UTF-8", errors="replace")


def exec_command(command, cwd=None):
    # timeout is 3 hours
    return exec_command_with_timeout_second(command, LONG_TIMEOUT_SECOND, cwd=cwd)


def exec_command_with_timeout_second(
    command,
    timeout_second=DEFAULT_TIMEOUT_SECOND,
    cwd=None,
    stdout=subprocess.PIPE,
    stderr=subprocess.STDOUT,
):
    """
    Run an argv list and wait for it.

    Returns:
        tuple: (exit_code, output) where output is stdout and stderr combined.
        A missing executable is reported as exit code 127.
    """
    start_mills = int(time.time() * 1000)
    try:
        compile_popen = subprocess.Popen(
            command,
            cwd=cwd,
            stdout=stdout,
            stderr=stderr,
        )
    except FileNotFoundError:
        return COMMAND_NOT_FOUND_CODE, f"Command not found: {command[0]}"
    timer = Timer(timeout_second, lambda process: process.kill(), [compile_popen])
    try:
        timer.start()
        stdout, stderr = compile_popen.communicate()
    finally:
        timer.cancel()
    err_code = compile_popen.returncode
    err_msg = decode_bytes(stdout)
    if err_code == -9:
        if not err_msg:
            if stderr:
                err_msg = decode_bytes(stderr)
            if not err_msg:
                use_time = int(time.time() * 1000) - start_mills
                err_msg = f"Failed for timeout({err_code}), use_time: {use_time}ms"
    return err_code, err_msg
