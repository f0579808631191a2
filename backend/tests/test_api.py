def test_root_reports_liveness(client):
    res = client.get('/')
    assert res.status_code == 200
    assert res.get_data(as_text=True) == 'Typo Royale backend running'
    assert res.mimetype == 'text/plain'


def test_root_is_not_json(client):
    res = client.get('/')
    assert res.get_json(silent=True) is None


def test_coordinator_is_registered_on_app(flask_app):
    coordinator = flask_app.extensions['typo_royale']
    assert len(coordinator.registry) == 0
    assert coordinator.scheduler.inline is True
