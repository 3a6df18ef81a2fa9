from contextlib import ExitStack

import pytest

from gnmistream.stats import ClientStats, TargetStats, TypeStats
from gnmistream.subscribe import (
    ACL,
    AllowAllACL,
    Notification,
    Server,
    ServerOptions,
    SubscribeError,
    SubscribeResponse,
    Update,
)
from gnmistream.value import from_scalar


def _notification(count=1):
    return Notification(
        timestamp=1,
        prefix="dev1",
        update=[Update(path=["a"], val=from_scalar(i)) for i in range(count)],
    )


def test_allow_all_acl_permits_everything():
    acl = AllowAllACL()
    assert acl.check("dev-pii") is True
    assert acl.check("*") is True


def test_acl_is_abstract():
    with pytest.raises(TypeError):
        ACL()


def test_subscribe_error_text():
    err = SubscribeError("PermissionDenied", 'not authorized for target "dev-pii"')
    assert str(err) == 'rpc error: code = PermissionDenied desc = not authorized for target "dev-pii"'
    assert err.code == "PermissionDenied"


def test_timeout_defaults_to_a_minute():
    assert Server().options.timeout == 60.0
    assert ServerOptions(timeout=0).timeout == 60.0
    assert ServerOptions(timeout=0.1).timeout == 0.1


def test_report_coalesced_duplicates():
    server = Server(options=ServerOptions(stats=True))
    n = _notification(2)
    resp = server.make_subscribe_response(n, 4)
    assert resp.update.update[0].duplicates == 4
    assert resp.update.update[1].duplicates == 0
    assert n.update[0].duplicates == 0
    assert resp.update.update[0].val == n.update[0].val


def test_dont_report_coalesced_duplicates():
    server = Server(options=ServerOptions(stats=True, no_dup_report=True))
    n = _notification()
    resp = server.make_subscribe_response(n, 4)
    assert resp.update.update[0].duplicates == 0
    assert resp.update is n


def test_no_duplicates_shares_notification():
    server = Server()
    n = _notification()
    resp = server.make_subscribe_response(n, 0)
    assert resp == SubscribeResponse(update=n)
    assert resp.update is n


def test_duplicates_on_notification_without_updates():
    server = Server()
    n = Notification(prefix="dev1", delete=[["a"]])
    assert server.make_subscribe_response(n, 3).update is n


def test_invalid_notification_type():
    with pytest.raises(SubscribeError) as info:
        Server().make_subscribe_response("not a notification", 1)
    assert info.value.code == "Internal"


def test_stats_disabled():
    server = Server()
    with server.track_target("dev1"), server.track_type("stream"):
        server.update_client_stats("c", "dev1", 1, 1)
        assert server.type_stats() is None
        assert server.target_stats() is None
        assert server.client_stats() is None


def test_client_stats_queue_and_coalesce():
    seen = []
    server = Server(
        options=ServerOptions(stats=True, client_stats_hook=lambda d, q: seen.append((d, q)))
    )
    server.update_client_stats("peer:1", "dev1", 0, 1)
    assert server.client_stats()["peer:1"].queue_size == 1
    server.update_client_stats("peer:1", "dev1", 4, 0)
    assert server.client_stats() == {
        "peer:1": ClientStats(target="dev1", coalesce_count=4, queue_size=0)
    }
    assert seen == [(0, 1), (4, 0)]
    server.remove_client("peer:1")
    assert server.client_stats() == {}


def test_server_stats():
    enters = []
    exits = []
    server = Server(
        options=ServerOptions(
            stats=True,
            subscription_enter_hook=lambda: enters.append(1),
            subscription_exit_hook=lambda: exits.append(1),
        )
    )

    def subscribe(target, mode):
        stack = ExitStack()
        stack.enter_context(server.track_target(target))
        stack.enter_context(server.track_type(mode))
        return stack

    c1 = subscribe("dev1", "stream")
    assert len(enters) == 1
    assert server.type_stats() == {"stream": TypeStats(1, 1)}
    assert server.target_stats() == {"dev1": TargetStats(1, 1)}

    c2 = subscribe("dev2", "stream")
    assert server.type_stats() == {"stream": TypeStats(2, 2)}
    assert server.target_stats() == {"dev1": TargetStats(1, 1), "dev2": TargetStats(1, 1)}

    c3 = subscribe("dev1", "poll")
    assert len(enters) == 3
    assert server.type_stats() == {"stream": TypeStats(2, 2), "poll": TypeStats(1, 1)}
    assert server.target_stats() == {"dev1": TargetStats(2, 2), "dev2": TargetStats(1, 1)}

    c1.close()
    assert len(exits) == 1
    assert server.type_stats() == {"stream": TypeStats(1, 2), "poll": TypeStats(1, 1)}
    assert server.target_stats() == {"dev1": TargetStats(1, 2), "dev2": TargetStats(1, 1)}

    c2.close()
    assert server.type_stats() == {"stream": TypeStats(0, 2), "poll": TypeStats(1, 1)}
    assert server.target_stats() == {"dev1": TargetStats(1, 2), "dev2": TargetStats(0, 1)}

    c3.close()
    assert len(exits) == 3
    assert server.type_stats() == {"stream": TypeStats(0, 2), "poll": TypeStats(0, 1)}
    assert server.target_stats() == {"dev1": TargetStats(0, 2), "dev2": TargetStats(0, 1)}


def test_tracking_released_on_error():
    server = Server(options=ServerOptions(stats=True))
    with pytest.raises(RuntimeError):
        with server.track_target("dev1"), server.track_type("once"):
            raise RuntimeError("boom")
    assert server.type_stats() == {"once": TypeStats(0, 1)}
    assert server.target_stats() == {"dev1": TargetStats(0, 1)}