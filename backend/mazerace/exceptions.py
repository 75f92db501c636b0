"""Room errors surfaced to the client that sent the offending action."""


class MazeRaceError(Exception):
    """Base class for errors reported back to a client as an ``error`` event."""
    message = 'Something went wrong'

    def __init__(self, message=None):
        super().__init__(message or self.message)

    @property
    def client_message(self) -> str:
        return str(self)


class RoomNotFound(MazeRaceError):
    message = 'Room not found'

    def __init__(self, room_code=None):
        self.room_code = room_code
        super().__init__()


class GameInProgress(MazeRaceError):
    message = 'Game already in progress'


class RoomFull(MazeRaceError):
    message = 'Room is full'


class AlreadyInRoom(MazeRaceError):
    message = 'You are already in this room'
