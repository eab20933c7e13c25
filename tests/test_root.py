from django.urls import reverse


def test_root_greeting(client):
    response = client.get(reverse("index"))
    assert response.status_code == 200
    assert response.json() == "Blogify! Knowledge creation at best"


def test_root_is_read_only(client):
    assert client.post(reverse("index")).status_code == 405
