"""ircDDB application layer: routing updates, heard reports and repeater info."""

import enum
import logging
import re
import threading
import time

from dstargate.ircmessage import IRCMessage
from dstargate.ircutils import current_time, parse_time, tokenize
from dstargate.messagequeue import IRCMessageQueue

log = logging.getLogger(__name__)

NUMBER_OF_TABLES = 2
INITIAL_MAX_TIME = 950000000  # Feb 2000

_TABLE = re.compile(r"[0-9]")
_DATE = re.compile(r"20[0-9][0-9]-((1[0-2])|(0[1-9]))-((3[01])|([12][0-9])|(0[1-9]))")
_TIME = re.compile(r"((2[0-3])|([01][0-9])):[0-5][0-9]:[0-5][0-9]")
_DB = re.compile(r"[0-9A-Z_]{8}")
_MODULE = re.compile(r".*[ABCD]D?", re.DOTALL)
_NON_VALID = re.compile(r"[^a-zA-Z0-9 +&(),./'-_]+")
_NON_GRAPH = re.compile(r"[^\x21-\x7e]+")
_NON_CALL = re.compile(r"[^A-Z0-9/_]")


class ResponseType(enum.Enum):
    NONE = 0
    PING = 1


def _gate_of(name):
    return name.upper()[:7].ljust(7) + "G"


class IRCDDBApp:
    """State machine that syncs the routing cache and publishes repeater data.

    ``cache`` is any object offering update_name, update_gate, erase_name,
    erase_gate, clear_gate, find_server_user, find_name_nick, update_rptr
    and update_user.
    """

    def __init__(self, update_channel, cache, log_irc=False):
        self.update_channel = update_channel
        self.cache = cache
        self.log_irc = log_irc
        self.max_time = INITIAL_MAX_TIME
        self.wd_timer = -1
        self.wd_info = ""
        self.info_timer = 0
        self.send_queue = None
        self.init_ready = False
        self.state = 0
        self.timer = 0
        self.my_nick = "none"
        self.best_server = ""
        self.current_server = ""
        self._sendlist_table_id = 0
        self._reply_q = IRCMessageQueue()
        self._maps_lock = threading.Lock()
        self._location_map = {}
        self._url_map = {}
        self._module_map = {}
        self._sw_map = {}
        self._stop = threading.Event()
        self._thread = None

    @property
    def connection_state(self):
        return self.state

    @property
    def running(self):
        return self._thread is not None and self._thread.is_alive()

    def rptr_qth(self, rptrcall, latitude, longitude, desc1, desc2, info_url, sw_version):
        """Record the location, URL and software of a repeater for publishing."""
        pos = "%+09.5f %+010.5f" % (latitude, longitude)
        d1 = _NON_VALID.sub("", desc1[:20].ljust(20, "_")).replace(" ", "_")
        d2 = _NON_VALID.sub("", desc2[:20].ljust(20, "_")).replace(" ", "_")
        rcall = rptrcall.replace(" ", "_")
        url = _NON_VALID.sub("", info_url)
        sw = _NON_VALID.sub("", sw_version)
        with self._maps_lock:
            self._location_map[rptrcall] = f"{rcall} {pos} {d1} {d2}"
            self._url_map[rptrcall] = f"{rcall} {url}"
            self._sw_map[rptrcall] = f"{rcall} {sw}"
        self.info_timer = 5

    def rptr_qrg(self, rptrcall, tx_frequency, duplex_shift, range_m, agl):
        """Record the frequencies, range and antenna height of a repeater module."""
        if not _MODULE.fullmatch(rptrcall):
            return
        c = rptrcall.replace(" ", "_")
        f = "%011.5f %+010.5f %06.2f %06.1f" % (
            tx_frequency, duplex_shift, range_m / 1609.344, agl)
        with self._maps_lock:
            self._module_map[rptrcall] = f"{c} {f}"
        self.info_timer = 5

    def kick_watchdog(self, info):
        if info:
            cleaned = _NON_GRAPH.sub("", info)
            self.wd_info = cleaned
            if cleaned:
                self.wd_timer = 1

    def get_reply_message_type(self):
        m = self._reply_q.peek()
        if m is None:
            return ResponseType.NONE
        if m.command == "IDRT_PING":
            return ResponseType.PING
        log.warning("unknown msg type: %s", m.command)
        return ResponseType.NONE

    def get_reply_message(self):
        return self._reply_q.get()

    def put_reply_message(self, message):
        self._reply_q.put(message)

    def start(self):
        """Run the state machine once a second in a background thread."""
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
        while not self._stop.is_set():
            self.step()
            self._stop.wait(1.0)

    def _queue(self, message):
        q = self.send_queue
        if q is not None:
            q.put(message)

    def step(self):
        """Advance the state machine by one one-second tick."""
        if self.timer > 0:
            self.timer -= 1
        state = self.state
        q = self.send_queue
        if state == 0:
            if q is not None:
                self.state = 1
        elif state == 1:
            self.state = 2
            self.timer = 200
        elif state == 2:
            log.info("state=2 choose new 's-'-user")
            if q is None:
                self.state = 10
            elif self._find_server_user():
                self._sendlist_table_id = NUMBER_OF_TABLES
                self.state = 3
            elif self.timer == 0:
                self.state = 10
                self._queue(IRCMessage("QUIT", ["no op user with 's-' found."]))
        elif state == 3:
            if q is None:
                self.state = 10
            else:
                self._sendlist_table_id -= 1
                if self._sendlist_table_id < 0:
                    self.state = 6
                else:
                    log.info("state=3 tableID=%d", self._sendlist_table_id)
                    self.state = 4
                    self.timer = 900
        elif state == 4:
            if q is None:
                self.state = 10
            elif self._sendlist_table_id == 1:
                tid = self._sendlist_table_id
                text = ("SENDLIST" + self._table_id_string(tid, True) + " "
                        + self._last_entry_time(tid))
                self._queue(IRCMessage.privmsg(self.current_server, text))
                self.state = 5
            else:
                self.state = 3
        elif state == 5:
            if q is None or self.timer == 0:
                self.state = 10
                if q is not None:
                    self._queue(IRCMessage("QUIT", ["timeout SENDLIST"]))
        elif state == 6:
            if q is None:
                self.state = 10
            else:
                log.info("state=6 initialization completed")
                self.info_timer = 2
                self.init_ready = True
                self.state = 7
        elif state == 7:
            self._standby(q)
        elif state == 10:
            self.state = 0
            self.timer = 0
            self.init_ready = False

    def _standby(self, q):
        if q is None:
            self.state = 10
        if self.info_timer > 0:
            self.info_timer -= 1
            if self.info_timer == 0:
                with self._maps_lock:
                    for title, table in (("RPTRQTH", self._location_map),
                                         ("RPTRURL", self._url_map),
                                         ("RPTRQRG", self._module_map),
                                         ("RPTRSW", self._sw_map)):
                        for _key, value in sorted(table.items()):
                            self._queue(IRCMessage.privmsg(
                                self.current_server, f"IRCDDB {title}: {value}"))
        if self.wd_timer > 0:
            self.wd_timer -= 1
            if self.wd_timer <= 0:
                self.wd_timer = 900
                self._queue(IRCMessage.privmsg(
                    self.current_server,
                    f"IRCDDB WATCHDOG: {current_time()} {self.wd_info} 1"))

    def user_join(self, nick, name, addr):
        if nick.startswith("u-"):
            return
        gate = _gate_of(name)
        self.cache.update_name(name, nick)
        self.cache.update_gate(gate, addr)
        if self.log_irc:
            log.info("Update GATE: %s --> %s", gate, addr)

    def user_leave(self, nick):
        if nick.startswith("s-"):
            self.current_server = ""
            self.state = 2
            self.timer = 200
            self.init_ready = False
            return
        name = nick[:-1]
        if name.endswith("-"):
            name = name[:-1]
            self.cache.erase_name(name)
            self.cache.erase_gate(_gate_of(name))

    def user_list_reset(self):
        self.cache.clear_gate()

    def set_current_nick(self, nick):
        self.my_nick = nick
        log.info("setCurrentNick %s", nick)

    def set_best_server(self, server):
        self.best_server = server
        log.info("setBestServer %s", server)

    def set_send_queue(self, queue):
        self.send_queue = queue

    def _find_server_user(self):
        suser = self.cache.find_server_user()
        if not suser:
            return False
        self.current_server = suser
        return True

    def send_ping(self, to, frm):
        """Ask the gateway of ``to`` to ping back ``frm``; True if a message was queued."""
        name = to[:7].rstrip(" \t\n\v\f\r").lower()
        nick = self.cache.find_name_nick(name)
        if not nick or self.send_queue is None:
            return False
        m = IRCMessage.privmsg(nick, "IDRT_PING")
        m.add_param(frm.replace(" ", "_"))
        self.send_queue.put(m)
        return True

    def send_heard(self, my_call, my_call_ext, your_call, rpt1, rpt2, flag1, flag2, flag3,
                   destination, tx_msg, tx_stats):
        """Queue an UPDATE for a heard station; False if the network is not ready."""
        my, myext, ur, r1, r2, dest = (
            _NON_CALL.sub("_", s)
            for s in (my_call, my_call_ext, your_call, rpt1, rpt2, destination))
        stats_msg = bool(tx_stats)
        srv = self.current_server
        q = self.send_queue
        if not srv or self.state < 6 or q is None:
            return False
        parts = [f"UPDATE {current_time()} {my} {r1} "]
        if not stats_msg:
            parts.append("0 ")
        parts.append(f"{r2} {ur} %02X %02X %02X {myext}" % (flag1, flag2, flag3))
        if stats_msg:
            parts.append(f" # {tx_stats}")
        else:
            parts.append(f" 00 {dest}")
            if len(tx_msg) == 20:
                parts.append(f" {tx_msg}")
        q.put(IRCMessage.privmsg(srv, "".join(parts)))
        return True

    def find_user(self, user_call):
        srv = self.current_server
        q = self.send_queue
        if srv and self.state >= 6 and q is not None:
            q.put(IRCMessage.privmsg(srv, "FIND " + user_call.replace(" ", "_")))
        return True

    def msg_channel(self, message):
        if message.prefix_nick.startswith("s-") and len(message.params) >= 2:
            self._do_update(message.params[1])

    def msg_query(self, message):
        if not (message.prefix_nick[:2] == "s-" and len(message.params) >= 2):
            return
        tokens = tokenize(message.params[1])
        if not tokens:
            return
        cmd, rest = tokens[0], " ".join(tokens[1:])
        if cmd == "UPDATE":
            self._do_update(rest)
        elif cmd == "LIST_END":
            if self.state == 5:
                self.state = 3
        elif cmd == "LIST_MORE":
            if self.state == 5:
                self.state = 4
        elif cmd == "NOT_FOUND":
            callsign = self._do_not_found(rest)
            if callsign:
                reply = IRCMessage("IDRT_USER", [callsign.replace("_", " "), "", "", "", ""])
                self._reply_q.put(reply)

    def _do_not_found(self, msg):
        tokens = tokenize(msg)
        if not tokens:
            return ""
        tk = tokens.pop(0)
        if _TABLE.fullmatch(tk):
            if int(tk) >= NUMBER_OF_TABLES:
                log.warning("invalid table ID %s", tk)
                return ""
            if not tokens:
                return ""
            tk = tokens[0][1:]
        return tk if _DB.fullmatch(tk) else ""

    def _do_update(self, msg):
        tokens = tokenize(msg)
        if not tokens:
            return
        table_id = 0
        tk = tokens.pop(0)
        if _TABLE.fullmatch(tk):
            table_id = int(tk)
            if table_id >= NUMBER_OF_TABLES:
                log.warning("invalid table ID %d", table_id)
                return
            if not tokens:
                return
            tk = tokens.pop(0)
        if not _DATE.fullmatch(tk) or not tokens:
            return
        time_token = tokens.pop(0)
        if not _TIME.fullmatch(time_token):
            return
        tstr = f"{tk} {time_token}"
        rtime = parse_time(tstr)
        if len(tokens) < 2:
            return
        key, value = tokens[0], tokens[1]
        if not _DB.fullmatch(key) or not _DB.fullmatch(value):
            return
        if table_id == 1:
            if self.init_ready and key[:6] != value[:6]:
                rptr = key.replace("_", " ")
                gate = value.replace("_", " ")[:7] + "G"
                self.cache.update_rptr(rptr, gate, "")
                if self.log_irc:
                    log.info("Update RPTR %s --> %s", rptr, gate)
                if rtime > self.max_time:
                    self.max_time = rtime
        elif self.init_ready:
            user = key.replace("_", " ")
            rptr = value.replace("_", " ")
            self.cache.update_user(user, rptr, "", "", tstr)
            if self.log_irc:
                log.info("Update USER: %s --> %s at %s", user, rptr, tstr)

    @staticmethod
    def _table_id_string(table_id, space_before_number):
        if table_id == 0:
            return ""
        if 0 < table_id < NUMBER_OF_TABLES:
            return f" {table_id}" if space_before_number else f"{table_id} "
        return " TABLE_ID_OUT_OF_RANGE "

    def _last_entry_time(self, table_id):
        if table_id == 1:
            return time.strftime("%Y-%m-%d %H:%M:%S", time.gmtime(self.max_time))
        return "DBERROR"