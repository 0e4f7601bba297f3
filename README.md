# dstargate

Building blocks for a D-STAR repeater gateway, in plain Python with no
third-party dependencies.

## What is inside

| Module | Purpose |
| --- | --- |
| `dstargate.typemark` | `TypeMarkModule` stores the three "flag b" bytes (type, mark, module) for modules A, B and C. |
| `dstargate.streamid` | `StreamIdGenerator.new_stream_id()` returns random non-zero 16-bit stream ids. |
| `dstargate.timer` | `Timer`, a restartable stopwatch on a monotonic clock (`start()`, `elapsed()`). |
| `dstargate.textutil` | `ltrim`, `rtrim` and `trim` for the C locale's whitespace characters. |
| `dstargate.hostqueue` | `Host` records (name, addr, port) and a FIFO queue, `TQueue`. |
| `dstargate.sockaddress` | `SockAddress`, an IPv4/IPv6 address and port. Equality compares family and address only. `"loc..."` means loopback and `"any..."` the wildcard address. |
| `dstargate.udpsocket` | `UDPSocket`, a non-blocking, bound UDP socket usable as a context manager. |
| `dstargate.unixdgram` | `UnixDgramReader` and `UnixDgramWriter`, datagram sockets in the abstract Unix namespace for passing packets between local programs. |
| `dstargate.tcpclient` | `TCPClient`, a TCP connection with `read`, `read_exact`, `read_line`, `write` and `write_line`. Name resolution is retried while the resolver answers "try again". |
| `dstargate.voice` | Builds and writes a request asking the gateway to play an installed announcement file on a module. |
| `dstargate.ircutils` | `parse_time`, `tokenize`, `current_time` and `truncate`. |
| `dstargate.ircmessage` | `IRCMessage`: prefix, command and parameters. Includes `privmsg()`, the `prefix_nick`, `prefix_name` and `prefix_host` properties, and `compose()` for the wire form. |
| `dstargate.messagequeue` | `IRCMessageQueue`, a thread-safe FIFO of messages with an end-of-stream flag. |
| `dstargate.ircreceiver` | `MessageParser`, an incremental IRC line parser, and `IRCReceiver`, a thread that reads a connected socket into an `IRCMessageQueue`. |
| `dstargate.ircddbapp` | `IRCDDBApp`, the ircDDB application state machine. It syncs a routing cache, answers server queries, queues heard reports and publishes repeater location, frequency, URL, software and watchdog messages. |

## Examples

Keeping track of per-module flag bytes:

```python
from dstargate.typemark import TypeMarkModule

flags = TypeMarkModule()
flags.load_flagb("A", bytes([0x00, 0x01, 0x03]))
flags.is_equal("A", bytes([0x00, 0x01, 0x03]))   # True
flags.get_flagb("A")                             # b'\x00\x01\x03'
```

Composing and parsing IRC messages:

```python
from dstargate.ircmessage import IRCMessage
from dstargate.ircreceiver import MessageParser

IRCMessage.privmsg("s-grp1s1", "FIND N0CALL__").compose()
# 'PRIVMSG s-grp1s1 :FIND N0CALL__\r\n'

parser = MessageParser()
(msg,) = parser.feed(b":nick!name@host PRIVMSG #dstar :hello there\r\n")
msg.command, msg.params, msg.prefix_nick
# ('PRIVMSG', ['#dstar', 'hello there'], 'nick')
```

Requesting a voice announcement:

```python
from dstargate.voice import format_request, write_request

format_request("a", "unlinked.dat", "Hello world")
# 'A_unlinked.dat_Hello_world_________\n'

# Checks that <announce_dir>/unlinked.dat exists, then writes the line
write_request("a", "unlinked.dat", "Hello world", "/usr/local/etc", "/tmp/qnvoice")
```

Sending a datagram to a local program:

```python
from dstargate.unixdgram import UnixDgramReader, UnixDgramWriter

with UnixDgramReader() as reader:
    reader.open("remote2gate")
    UnixDgramWriter("remote2gate").write(b"DSVT...")
    data = reader.read(100)
```

Running the ircDDB application layer:

`IRCDDBApp(update_channel, cache, log_irc)` takes a cache object that you
supply. The cache must provide these methods:

- `update_name`, `update_gate`, `erase_name`, `erase_gate`, `clear_gate`
- `find_server_user`, `find_name_nick`
- `update_rptr`, `update_user`

Once `set_send_queue(queue)` receives an `IRCMessageQueue`, you drive the
application in one of two ways:

- call `step()` once a second yourself, or
- call `start()` to run it in a background thread, and `stop()` to end it.

Messages it wants sent appear on that queue. Pass received server messages to
`msg_channel()` and `msg_query()`, and joins and leaves to `user_join()` and
`user_leave()`. `send_heard()` returns `False` until the application has chosen
a server and completed its initial sync.

## What this package does not do

- It provides no command-line programs.
- It does not build or checksum D-STAR header and voice packets.
- It does not forward APRS position reports.
- It has no IRC login, join and ping handling, and nothing that opens and
  re-opens the connection to an ircDDB server. An application wires
  `TCPClient`, `IRCReceiver`, `IRCMessageQueue` and `IRCDDBApp` together
  itself, and answers the server's PING and handshake messages itself.
- It has no storage for the routing cache. `IRCDDBApp` only calls the cache
  object it is given.

## Requirements

Python 3.10 or newer on Linux. The inter-program sockets use the abstract Unix
socket namespace.