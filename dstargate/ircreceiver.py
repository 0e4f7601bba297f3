"""Reads the IRC connection and turns its bytes into queued messages."""

import logging
import select
import threading

from dstargate.ircmessage import IRCMessage

log = logging.getLogger(__name__)

READ_SIZE = 200
SELECT_TIMEOUT = 1.0
MAX_PARAMS = 15

_START, _PREFIX, _COMMAND, _PARAMS, _TRAILING, _IGNORE = range(6)


class MessageParser:
    """Incremental parser of IRC lines; keeps partial lines between calls."""

    def __init__(self):
        self._reset()

    def _reset(self):
        self._state = _START
        self._prefix = ""
        self._command = ""
        self._params = []

    def _finish(self):
        message = IRCMessage(self._command, list(self._params))
        message.prefix = self._prefix
        self._reset()
        return message

    def feed(self, data):
        """Consume ``data`` and return the messages completed by it."""
        done = []
        for byte in bytes(data):
            if not 0 < byte < 0x80:
                continue
            ch = chr(byte)
            if ch == "\n":
                done.append(self._finish())
            elif ch == "\r":
                continue
            elif self._state == _START:
                if ch == ":":
                    self._state = _PREFIX
                elif ch != " ":
                    self._command += ch
                    self._state = _COMMAND
            elif self._state == _PREFIX:
                if ch == " ":
                    self._state = _COMMAND
                else:
                    self._prefix += ch
            elif self._state == _COMMAND:
                if ch == " ":
                    self._state = _PARAMS
                    self._params.append("")
                else:
                    self._command += ch
            elif self._state == _PARAMS:
                if ch == " ":
                    if len(self._params) + 1 >= MAX_PARAMS:
                        self._state = _IGNORE
                    self._params.append("")
                elif ch == ":" and not self._params[-1]:
                    self._state = _TRAILING
                else:
                    self._params[-1] += ch
            elif self._state == _TRAILING:
                self._params[-1] += ch
        return done


class IRCReceiver:
    """Background thread feeding a message queue from a connected client socket.

    ``sock`` needs ``fileno()`` and ``read(size)``; on error or end of stream
    the queue is marked with ``signal_eof`` and the thread ends.
    """

    def __init__(self, sock, queue):
        self.sock = sock
        self.queue = queue
        self._stop = threading.Event()
        self._thread = None

    def start(self):
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()
        return True

    def stop(self):
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def _run(self):
        parser = MessageParser()
        while not self._stop.is_set():
            data = self._read()
            if data is None:
                self.queue.signal_eof()
                break
            for message in parser.feed(data):
                self.queue.put(message)

    def _read(self):
        """Return received bytes, b"" on a quiet second, or None on error or EOF."""
        fd = self.sock.fileno()
        if fd < 0:
            log.error("receiver socket is closed")
            return None
        try:
            readable, _, failed = select.select([fd], [], [fd], SELECT_TIMEOUT)
        except (OSError, ValueError) as err:
            log.error("select() error: %s", err)
            return None
        if failed:
            log.error("exceptional condition on the IRC socket")
            return None
        if not readable:
            return b""
        try:
            data = self.sock.read(READ_SIZE)
        except OSError as err:
            log.error("recv error: %s", err)
            return None
        if not data:
            log.info("EOF on the IRC socket")
            return None
        return data