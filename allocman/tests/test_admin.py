"""
Tests for the read-only admin.
"""

import pytest

from allocman.models import Channel, Sale


pytestmark = pytest.mark.django_db


@pytest.mark.parametrize('model', ['batch', 'channelstock', 'sale'])
def test_changelist_renders(admin_client, batch_a, model):
    Sale.objects.create(batch_id=batch_a.id, channel=Channel.PHYSICAL, quantity=1, reference='NF-1')

    response = admin_client.get(f'/admin/allocman/{model}/')

    assert response.status_code == 200


def test_batch_detail_renders(admin_client, batch_a):
    response = admin_client.get(f'/admin/allocman/batch/{batch_a.id}/change/')

    assert response.status_code == 200
    assert b'Fornecedor A' in response.content


@pytest.mark.parametrize('model', ['batch', 'channelstock', 'sale'])
def test_add_is_forbidden(admin_client, model):
    response = admin_client.get(f'/admin/allocman/{model}/add/')

    assert response.status_code == 403


def test_delete_is_forbidden(admin_client, batch_a):
    response = admin_client.get(f'/admin/allocman/batch/{batch_a.id}/delete/')

    assert response.status_code == 403
