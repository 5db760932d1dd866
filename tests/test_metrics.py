from prometheus_client import REGISTRY


def _searches(outcome):
    return REGISTRY.get_sample_value('bidhaa_search_requests_total', {'outcome': outcome}) or 0


def test_metrics_endpoint(client):
    client.get('/health')
    resp = client.get('/metrics')
    assert resp.status_code == 200
    assert b'flask_http_request' in resp.data


def test_search_outcomes_counted(client):
    rejected, miss = _searches('rejected'), _searches('miss')
    client.get('/api/search')
    client.get('/api/search?q=nothing-here')
    assert _searches('rejected') == rejected + 1
    assert _searches('miss') == miss + 1


def test_error_responses_counted(client):
    def errors():
        return REGISTRY.get_sample_value(
            'bidhaa_http_error_total',
            {'endpoint': 'unknown', 'method': 'GET', 'code': '404'},
        ) or 0
    before = errors()
    client.get('/missing')
    assert errors() == before + 1
