from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set

import events
from backend import RoomAnnouncer
from constants import INPUT_FANOUT, INPUT_FANOUT_HOST
from logging_config import get_logger
from relay.authorization import CursorAuthorizationTable
from relay.directory import RoomDirectory
from relay.errors import AlreadyHosted, CrossRoomBind, DuplicateJoin, NoHost, RelayError, Unauthorized
from relay.locks import RoomLocks
from relay.mailbox import SignalMailbox
from relay.registry import ConnectionRegistry
from schemas.messages import InboundMessage, SignalEnvelope

logger = get_logger(__name__)


@dataclass(frozen=True)
class Outbound:
    target: str
    event: str
    data: Any = None


class SessionHandler:
    """Binds the registry, directory, mailbox and authorization table together.

    `dispatch` takes one validated inbound message from a connection and
    returns the messages to send, addressed to individual connection ids.
    All state changes for a room happen under that room's lock; nothing is
    sent from here, so no I/O ever happens while a lock is held.

    Connection states: unjoined -> host | viewer -> left/disconnected.
    `leave` is terminal for the connection; `disconnect` forgets it.
    """

    def __init__(
        self,
        registry: Optional[ConnectionRegistry] = None,
        directory: Optional[RoomDirectory] = None,
        mailbox: Optional[SignalMailbox] = None,
        authorization: Optional[CursorAuthorizationTable] = None,
        announcer: Optional[RoomAnnouncer] = None,
        input_fanout: str = INPUT_FANOUT,
    ):
        self.registry = registry or ConnectionRegistry()
        self.directory = directory or RoomDirectory()
        self.mailbox = mailbox or SignalMailbox()
        self.authorization = authorization or CursorAuthorizationTable(self.directory)
        self.announcer = announcer or RoomAnnouncer()
        self.input_fanout = input_fanout
        self.locks = RoomLocks()
        self._left: Set[str] = set()
        self._routes = {
            events.JOIN: lambda conn_id, data: self.join(conn_id, data.room, data.isHost),
            events.START_HOST: lambda conn_id, data: self.join(conn_id, data.room, True),
            events.SIGNAL: lambda conn_id, data: self.signal(conn_id, data.room, data.payload),
            events.CURSOR_REQUEST: lambda conn_id, data: self.cursor_request(conn_id, data.room),
            events.CURSOR_RESPONSE: lambda conn_id, data: self.cursor_response(conn_id, data.room, data.viewerId, data.approved),
            events.LEAVE: lambda conn_id, data: self.leave(conn_id, data.room),
        }
        for name in events.INPUT_EVENTS:
            self._routes[name] = self._input_route(name)

    def _input_route(self, name: str):
        def route(conn_id, data):
            fields = data.model_dump(exclude={"room", "senderId"})
            return self.input_event(conn_id, data.room, name, fields)
        return route

    def dispatch(self, conn_id: str, message: InboundMessage) -> List[Outbound]:
        route = self._routes[message.event]
        try:
            return route(conn_id, message.data)
        except AlreadyHosted as e:
            return [Outbound(conn_id, events.ERROR, {"message": str(e)})]
        except NoHost as e:
            logger.info(f"No host in room {e.room} for {message.event} from {conn_id}")
            return [Outbound(conn_id, events.NO_HOST, {"message": str(e)})]
        except RelayError as e:
            # Unauthorized, duplicate joins and stale releases are dropped without a reply
            logger.warning(f"Dropped {message.event} from {conn_id}: {e}")
            return []

    def join(self, conn_id: str, room: str, is_host: bool) -> List[Outbound]:
        logger.info(f"Join request: room={room}, isHost={is_host}, conn={conn_id}")
        if conn_id in self._left:
            raise DuplicateJoin(room, f"Connection {conn_id} has already left")
        current = self.registry.room_of(conn_id)
        if current is not None:
            raise DuplicateJoin(room, f"Duplicate join attempt by {conn_id} (already in room {current})")

        with self.locks.hold(room):
            if is_host:
                self.directory.claim_host(room, conn_id)
            else:
                self.directory.add_viewer(room, conn_id)
            try:
                self.registry.bind(conn_id, room)
            except CrossRoomBind:
                if is_host:
                    self.directory.release_host(room, conn_id)
                else:
                    self.directory.remove_viewer(room, conn_id)
                raise

            outbound = [Outbound(conn_id, events.JOINED, {"room": room, "isHost": is_host})]
            outbound += [
                Outbound(member, events.USER_JOINED, {"connId": conn_id})
                for member in self.directory.members(room) if member != conn_id
            ]
            if not is_host:
                for envelope in self.mailbox.drain(room):
                    outbound.append(Outbound(conn_id, events.SIGNAL, envelope.model_dump()))

        logger.info(f"User {conn_id} joined room {room} as {'host' if is_host else 'viewer'}")
        self.announcer.announce(room)
        return outbound

    def signal(self, conn_id: str, room: str, payload: Dict[str, Any]) -> List[Outbound]:
        with self.locks.hold(room):
            if self.registry.room_of(conn_id) != room:
                raise Unauthorized(room, f"Signal from {conn_id} who is not in room {room}")
            envelope = SignalEnvelope(senderId=conn_id, payload=payload)
            members = self.directory.members(room)
            if len(members) < 2:
                self.mailbox.buffer(room, envelope)
                return []
            logger.debug(f"Relaying signal from {conn_id} to {len(members) - 1} peers in room {room}")
            return [Outbound(member, events.SIGNAL, envelope.model_dump()) for member in members if member != conn_id]

    def cursor_request(self, conn_id: str, room: str) -> List[Outbound]:
        logger.info(f"Cursor request from {conn_id} for room {room}")
        with self.locks.hold(room):
            host_id = self.authorization.request_access(room, conn_id)
        return [Outbound(host_id, events.CURSOR_REQUEST, {"viewerId": conn_id})]

    def cursor_response(self, conn_id: str, room: str, viewer_id: str, approved: bool) -> List[Outbound]:
        logger.info(f"Cursor response from {conn_id} for client {viewer_id} in room {room}: {approved}")
        with self.locks.hold(room):
            if approved:
                self.authorization.grant(room, viewer_id, conn_id)
            else:
                self.authorization.deny(room, viewer_id, conn_id)
        return [Outbound(viewer_id, events.CURSOR_RESPONSE, {"approved": approved})]

    def input_event(self, conn_id: str, room: str, name: str, fields: Dict[str, Any]) -> List[Outbound]:
        with self.locks.hold(room):
            if self.registry.room_of(conn_id) != room or not self.authorization.is_authorized(room, conn_id):
                raise Unauthorized(room, f"Unauthorized {name} from {conn_id} in room {room}")
            if self.input_fanout == INPUT_FANOUT_HOST:
                targets = [self.directory.host_of(room)]
            else:
                targets = [member for member in self.directory.members(room) if member != conn_id]
        logger.debug(f"Processing {name} from {conn_id} in room {room}: {fields}")
        # the relay's own tag wins over anything the client put in the payload
        data = {**fields, "senderId": conn_id}
        return [Outbound(target, name, data) for target in targets]

    def leave(self, conn_id: str, room: str) -> List[Outbound]:
        logger.info(f"Leave request: room={room}, conn={conn_id}")
        with self.locks.hold(room):
            current = self.registry.room_of(conn_id)
            if current is None:
                # never joined, or orphaned by its host leaving; leaving is still final
                self._left.add(conn_id)
                return []
            if current != room:
                logger.debug(f"Ignoring leave of room {room} by {conn_id}: member of {current}")
                return []
            outbound, released = self._depart(conn_id, room)
        self._left.add(conn_id)
        if released:
            self.announcer.withdraw(room)
        return outbound

    def disconnect(self, conn_id: str) -> List[Outbound]:
        logger.info(f"User disconnected: {conn_id}")
        self._left.discard(conn_id)
        room = self.registry.room_of(conn_id)
        if room is None:
            return []
        with self.locks.hold(room):
            # the host may have torn the room down while we waited for the lock
            if self.registry.room_of(conn_id) != room:
                return []
            outbound, released = self._depart(conn_id, room)
        if released:
            self.announcer.withdraw(room)
        return outbound

    def _depart(self, conn_id: str, room: str):
        """Remove conn_id from room. Caller holds the room lock."""
        self.registry.unbind(conn_id)

        if self.directory.host_of(room) == conn_id:
            viewers = self.directory.release_host(room, conn_id)
            self.mailbox.purge(room)
            self.authorization.revoke_all(room)
            outbound = []
            for viewer in viewers:
                if self.registry.room_of(viewer) == room:
                    self.registry.unbind(viewer)
                outbound.append(Outbound(viewer, events.HOST_STOPPED))
                outbound.append(Outbound(viewer, events.USER_DISCONNECTED, {"connId": conn_id}))
            logger.info(f"Host {conn_id} left room {room}, released {len(viewers)} viewers")
            return outbound, True

        self.directory.remove_viewer(room, conn_id)
        self.authorization.revoke(room, conn_id)
        logger.info(f"Viewer {conn_id} left room {room}")
        outbound = [
            Outbound(member, events.USER_DISCONNECTED, {"connId": conn_id})
            for member in self.directory.members(room)
        ]
        return outbound, False

    def room_status(self, room: str) -> Optional[Dict[str, Any]]:
        with self.locks.hold(room):
            if room not in self.directory:
                return None
            return {
                "room_id": room,
                "hosted": True,
                "viewer_count": len(self.directory.viewers(room)),
                "authorized_count": len(self.authorization.authorized(room)),
                "mailbox_size": self.mailbox.size(room),
            }
