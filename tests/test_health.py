
def test_health_check(client):
    response = client.get('/health')
    assert response.status_code == 200
    json_data = response.get_json()
    assert json_data.get('status') == 'ok'


def test_api_docs_served(client):
    spec = client.get('/apispec.json')
    assert spec.status_code == 200
    paths = spec.get_json()['paths']
    assert '/api/search' in paths
    assert '/auth/register' in paths
    assert not any(p.startswith('/__') for p in paths)
