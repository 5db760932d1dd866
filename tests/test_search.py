import pytest
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from models import (
    db,
    Book,
    Apparatus,
    ScienceApparatus,
    Stationery,
    PlaygroundEquipment,
    Electronics,
)
from bidhaa.services.catalog import CatalogIntrospectionError
from bidhaa.services.search import expand_patterns


@pytest.fixture
def catalog(app):
    db.session.add_all([
        Book(book_title='Mathematics Grade 4', author='J. Otieno', publisher='KLB', grade='4',
             category='textbook', description='Primary maths course', price=450),
        Book(book_title='Advanced Math Revision', publisher='Longhorn', grade='8',
             category='revision', price=600),
        Book(book_title='English Grammar', publisher='KLB', grade='4',
             category='textbook', description='Grammar drills', price=300),
        Electronics(name='Scientific Calculator', brand='Casio', model='fx-82ES',
                    category='calculators', description='Ideal for math exams', price=1500),
        Stationery(name='Math Set', brand='Helix', category='geometry', price=150),
        Apparatus(name='Bunsen Burner', category='heating', price=2200),
        ScienceApparatus(name='Copper Sulphate', element='Copper', price=250),
        PlaygroundEquipment(name='Swing Set', category='outdoor', description='Steel frame swing', price=18000),
    ])
    db.session.commit()


def search(client, query=''):
    return client.get(f'/api/search?{query}')


def titles(resp):
    return [i['title'] for i in resp.get_json()['items']]


def test_single_word_matches_every_table_ordered_by_title(client, catalog):
    resp = search(client, 'q=math')
    assert resp.status_code == 200
    data = resp.get_json()
    assert data['success'] is True
    assert data['total'] == 4
    assert data['totalPages'] == 1
    assert titles(resp) == [
        'Advanced Math Revision',
        'Math Set',
        'Mathematics Grade 4',
        'Scientific Calculator',
    ]


def test_item_shape_and_float_prices(client, catalog):
    items = search(client, 'q=calculator').get_json()['items']
    assert items == [{
        'id': 1,
        'title': 'Scientific Calculator',
        'description': 'Ideal for math exams',
        'price': 1500.0,
        'image_url': '',
        'type': 'electronics',
    }]


def test_search_is_case_insensitive(client, catalog):
    assert search(client, 'q=MATH').get_json()['total'] == 4


def test_missing_optional_columns_default(client, catalog):
    items = search(client, 'q=copper').get_json()['items']
    assert len(items) == 1
    assert items[0]['type'] == 'science_apparatus'
    assert items[0]['description'] == ''


def test_phrase_ranks_before_single_words(client, catalog):
    resp = search(client, 'q=math+revision')
    data = resp.get_json()
    assert data['total'] == 4
    assert titles(resp)[0] == 'Advanced Math Revision'
    assert titles(resp)[1:] == ['Math Set', 'Mathematics Grade 4', 'Scientific Calculator']


def test_pagination_pages_and_out_of_range(client, catalog):
    first = search(client, 'q=math&limit=3&page=1').get_json()
    assert first['limit'] == 3
    assert first['totalPages'] == 2
    assert len(first['items']) == 3

    second = search(client, 'q=math&limit=3&page=2').get_json()
    assert [i['title'] for i in second['items']] == ['Scientific Calculator']

    beyond = search(client, 'q=math&limit=3&page=3').get_json()
    assert beyond['items'] == []
    assert beyond['total'] == 4
    assert beyond['totalPages'] == 2


def test_limit_defaults_and_cap(client, catalog):
    assert search(client, 'q=math').get_json()['limit'] == 12
    assert search(client, 'q=math&limit=1000').get_json()['limit'] == 100


def test_grade_filter_strips_prefix_and_skips_tables_without_grade(client, catalog):
    resp = search(client, 'grade=grade-4')
    assert resp.status_code == 200
    data = resp.get_json()
    assert data['total'] == 2
    assert {i['type'] for i in data['items']} == {'books'}
    assert titles(resp) == ['English Grammar', 'Mathematics Grade 4']


def test_term_and_publisher_filter_combined(client, catalog):
    resp = search(client, 'q=math&publisher=KLB')
    assert titles(resp) == ['Mathematics Grade 4']


def test_multi_valued_category_filter(client, catalog):
    resp = search(client, 'category=textbook&category=geometry')
    data = resp.get_json()
    assert data['total'] == 3
    assert titles(resp) == ['English Grammar', 'Math Set', 'Mathematics Grade 4']


def test_element_filter(client, catalog):
    resp = search(client, 'element=Copper')
    assert titles(resp) == ['Copper Sulphate']


def test_all_values_are_not_filters(client, catalog):
    resp = search(client, 'grade=all&publisher=all')
    assert resp.status_code == 400


@pytest.mark.parametrize('query', ['', 'q=', 'q=a', 'q=+++', 'page=2'])
def test_empty_search_rejected(client, catalog, query):
    resp = search(client, query)
    assert resp.status_code == 400
    assert resp.get_json()['message'] == 'Please provide a search term or select filters'


def test_like_wildcards_are_literal(client, catalog):
    resp = search(client, 'q=%25%25')
    assert resp.status_code == 200
    assert resp.get_json()['total'] == 0
    assert resp.get_json()['items'] == []


def test_no_match(client, catalog):
    data = search(client, 'q=telescope').get_json()
    assert data['total'] == 0
    assert data['totalPages'] == 0
    assert data['items'] == []


def test_invalid_page_is_validation_error(client, catalog):
    resp = search(client, 'q=math&page=0')
    assert resp.status_code == 400
    assert resp.get_json()['errors'][0]['field'] == 'page'


def test_introspection_failure_is_500(client, monkeypatch):
    def broken(*args, **kwargs):
        raise CatalogIntrospectionError('inspector exploded')
    monkeypatch.setattr('bidhaa.routes.search.get_registry', broken)
    resp = search(client, 'q=math')
    assert resp.status_code == 500
    data = resp.get_json()
    assert data['message'] == 'Error checking table structures'
    assert data['error'] == 'inspector exploded'


def test_database_failure_is_500(client, monkeypatch):
    def broken(*args, **kwargs):
        raise SQLAlchemyError('connection lost')
    monkeypatch.setattr('bidhaa.routes.search.search_catalog', broken)
    resp = search(client, 'q=math')
    assert resp.status_code == 500
    assert resp.get_json()['message'] == 'Error searching database'


def test_error_detail_hidden_when_disabled(app, client, monkeypatch):
    def broken(*args, **kwargs):
        raise SQLAlchemyError('connection lost')
    monkeypatch.setattr('bidhaa.routes.search.search_catalog', broken)
    monkeypatch.setitem(app.config, 'EXPOSE_ERROR_DETAILS', False)
    resp = search(client, 'q=math')
    assert resp.status_code == 500
    assert 'error' not in resp.get_json()


def test_count_failure_is_reported_separately(client, catalog, monkeypatch):
    monkeypatch.setattr(
        'bidhaa.services.search.count_statement',
        lambda queries: text('SELECT count(*) FROM no_such_table'),
    )
    resp = search(client, 'q=math')
    assert resp.status_code == 500
    assert resp.get_json()['message'] == 'Error counting search results'


def test_one_letter_term_narrows_filtered_search(client, catalog):
    db.session.add(Book(book_title='Zoology Form 1', publisher='KLB', grade='5',
                        category='textbook', price=700))
    db.session.commit()
    resp = search(client, 'q=z&publisher=KLB')
    assert resp.status_code == 200
    assert resp.get_json()['total'] == 1
    assert titles(resp) == ['Zoology Form 1']


def test_short_words_are_not_single_word_matches(client, catalog):
    db.session.add(Book(book_title='Plant Biology', publisher='Longhorn', grade='6',
                        category='textbook', price=500))
    db.session.commit()
    found = titles(search(client, 'q=an+math'))
    assert 'Plant Biology' not in found
    assert sorted(found) == [
        'Advanced Math Revision',
        'Math Set',
        'Mathematics Grade 4',
        'Scientific Calculator',
    ]


@pytest.mark.parametrize('term, expected', [
    ('math', ('%math%', '%math%', [])),
    ('Math Book', ('%math book%', '%math%book%', ['%math%', '%book%'])),
    ('an math', ('%an math%', '%an%math%', ['%math%'])),
    ('a_ pen', ('%a\\_ pen%', '%a\\_%pen%', ['%pen%'])),
    ('50% off', ('%50\\% off%', '%50\\%%off%', ['%50\\%%', '%off%'])),
])
def test_expand_patterns(term, expected):
    assert expand_patterns(term) == expected
