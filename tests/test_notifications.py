from aptos_wallet.shared.notifications import Notification, NotificationCenter, Severity


def make_notification(title="Transaction succeeded"):
    return Notification(title=title, description="done", severity=Severity.SUCCESS)


class TestNotificationCenter:
    def test_default_duration(self):
        assert make_notification().duration_ms == 7000

    def test_emit_reaches_listeners_and_history(self):
        center = NotificationCenter()
        received = []
        center.subscribe(received.append)

        notification = make_notification()
        center.emit(notification)

        assert received == [notification]
        assert list(center.history) == [notification]

    def test_unsubscribe(self):
        center = NotificationCenter()
        received = []
        center.subscribe(received.append)
        center.unsubscribe(received.append)
        center.unsubscribe(received.append)

        center.emit(make_notification())

        assert received == []

    def test_failing_listener_does_not_stop_others(self):
        center = NotificationCenter()
        received = []

        def broken(notification):
            raise RuntimeError("listener failed")

        center.subscribe(broken)
        center.subscribe(received.append)
        center.emit(make_notification("Transaction failed"))

        assert [n.title for n in received] == ["Transaction failed"]

    def test_history_keeps_only_recent_notifications(self):
        center = NotificationCenter(history_limit=2)

        for title in ("first", "second", "third"):
            center.emit(make_notification(title))

        assert [n.title for n in center.history] == ["second", "third"]

    def test_clear_history(self):
        center = NotificationCenter()
        center.emit(make_notification())

        center.clear_history()

        assert len(center.history) == 0
