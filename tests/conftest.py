import os
import sys
from collections import defaultdict

import pytest

# Ensure the repository root (containing the `vieja_relay` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
REPO_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from vieja_relay.server import TicTacToeServer


class Outbox:
    """Collects what the server sends, per connection."""

    def __init__(self):
        self.sent = defaultdict(list)

    def send(self, client, message):
        self.sent[client].append(message)

    def of(self, client, msg_type=None):
        messages = self.sent[client]
        if msg_type is None:
            return list(messages)
        return [m for m in messages if m['type'] == msg_type]

    def last(self, client, msg_type):
        found = self.of(client, msg_type)
        return found[-1] if found else None

    def clear(self):
        self.sent.clear()


class Client:
    def __init__(self, name):
        self.name = name

    def __repr__(self):
        return f'<Client {self.name}>'


def code_sequence(*codes):
    """Room code generator returning the given codes in order."""
    remaining = list(codes)

    def make_code():
        return remaining.pop(0)
    return make_code


@pytest.fixture()
def outbox():
    return Outbox()


@pytest.fixture()
def server(outbox):
    return TicTacToeServer(outbox.send, make_code=code_sequence('AB2CD', 'EF3GH', 'JK4LM'))


@pytest.fixture()
def alice():
    return Client('alice')


@pytest.fixture()
def bob():
    return Client('bob')


@pytest.fixture()
def carol():
    return Client('carol')


@pytest.fixture()
def playing(server, outbox, alice, bob):
    """A room with alice as X and bob as O, outbox flushed."""
    server.create_room(alice)
    server.join_room(bob, 'AB2CD')
    outbox.clear()
    return server.rooms['AB2CD']
