"""
Tests for the GitHub repository analyzer

HTTP is replaced by a mock session answering per URL.
"""
from unittest.mock import Mock

import pytest
import requests

from analysis.errors import InvalidRepositoryUrl, RepositoryFetchError
from analysis.flow_diagram import build_flow_diagram
from analysis.heuristics import find_collections, guess_collections_from_paths, is_source_file, scan_source
from analysis.repository_analyzer import RepositoryAnalyzer, parse_repository_url
from config import AnalyzerConfig

API = "https://api.github.com/repos/acme/shop"
RAW = "https://raw.githubusercontent.com/acme/shop/main"

CONTROLLER = """
const { MongoClient } = require('mongodb');
async function create(req, res) {
  await db.collection('orders').insertOne(req.body);
  const all = await db.collection('orders').find({}).toArray();
}
"""

SERVICE = """
from pymongo import MongoClient
users = client.shop.get_collection('users')
users.update_many({}, {'$set': {'active': True}})
users.aggregate([{'$match': {}}])
"""

README_JS = "export const version = '1.0.0';"


def response(status=200, json_data=None, text="", reason="OK"):
    resp = Mock()
    resp.status_code = status
    resp.ok = status < 400
    resp.reason = reason
    resp.json = Mock(return_value=json_data)
    resp.text = text
    return resp


def make_session(routes):
    """Mock session returning routes[url], or 404"""
    session = Mock()
    session.headers = {}
    session.get = Mock(side_effect=lambda url, timeout=None: routes.get(url, response(404, reason="Not Found")))
    return session


@pytest.fixture
def repo_routes():
    tree = [
        {'path': 'src/controllers/orderController.js', 'type': 'blob'},
        {'path': 'app/services/user_service.py', 'type': 'blob'},
        {'path': 'src/version.js', 'type': 'blob'},
        {'path': 'README.md', 'type': 'blob'},
        {'path': 'src', 'type': 'tree'},
    ]
    return {
        API: response(json_data={'default_branch': 'main'}),
        f"{API}/git/trees/main?recursive=1": response(json_data={'tree': tree}),
        f"{RAW}/src/controllers/orderController.js": response(text=CONTROLLER),
        f"{RAW}/app/services/user_service.py": response(text=SERVICE),
        f"{RAW}/src/version.js": response(text=README_JS),
    }


class TestParseRepositoryUrl:

    @pytest.mark.parametrize("url", [
        "https://github.com/acme/shop",
        "https://github.com/acme/shop.git",
        "github.com/acme/shop/tree/main/src",
    ])
    def test_valid(self, url):
        assert parse_repository_url(url) == ("acme", "shop")

    @pytest.mark.parametrize("url", ["", "https://gitlab.com/acme/shop", "https://github.com/acme"])
    def test_invalid(self, url):
        with pytest.raises(InvalidRepositoryUrl):
            parse_repository_url(url)


class TestAnalyze:

    def test_summarizes_mongo_usage(self, repo_routes):
        analyzer = RepositoryAnalyzer(AnalyzerConfig(), session=make_session(repo_routes))

        result = analyzer.analyze("https://github.com/acme/shop")

        assert result.total_files == 4
        assert result.mongo_files == 2
        assert result.operations == {
            'inserts': 1, 'finds': 1, 'updates': 1, 'deletes': 0, 'aggregates': 1,
        }
        assert result.collections == ['orders', 'users']
        paths = [f['path'] for f in result.files]
        assert paths == ['src/controllers/orderController.js', 'app/services/user_service.py']

    def test_flow_diagram_nodes(self, repo_routes):
        analyzer = RepositoryAnalyzer(AnalyzerConfig(), session=make_session(repo_routes))

        diagram = analyzer.analyze("https://github.com/acme/shop").to_dict()['flowDiagram']

        assert [n['type'] for n in diagram] == ['controller', 'service', 'database']
        assert diagram[0]['label'] == 'orderController'
        assert diagram[0]['operations'] == ['insert', 'find']
        assert diagram[-1] == {'id': '4', 'type': 'database', 'label': 'MongoDB', 'operations': ['CRUD']}

    def test_file_failure_is_skipped(self, repo_routes):
        repo_routes[f"{RAW}/app/services/user_service.py"] = response(500, reason="Server Error")
        analyzer = RepositoryAnalyzer(AnalyzerConfig(), session=make_session(repo_routes))

        result = analyzer.analyze("https://github.com/acme/shop")

        assert result.mongo_files == 1
        assert result.collections == ['orders']

    def test_caps_scanned_files(self, repo_routes):
        session = make_session(repo_routes)
        analyzer = RepositoryAnalyzer(AnalyzerConfig(max_files=1), session=session)

        analyzer.analyze("https://github.com/acme/shop")

        raw_calls = [c.args[0] for c in session.get.call_args_list if c.args[0].startswith(RAW)]
        assert raw_calls == [f"{RAW}/src/controllers/orderController.js"]

    def test_missing_repository(self):
        analyzer = RepositoryAnalyzer(AnalyzerConfig(), session=make_session({}))

        with pytest.raises(RepositoryFetchError) as exc:
            analyzer.analyze("https://github.com/acme/shop")

        assert exc.value.status_code == 404
        assert "Failed to fetch repository info" in str(exc.value)

    def test_network_error(self):
        session = make_session({})
        session.get.side_effect = requests.ConnectionError("unreachable")
        analyzer = RepositoryAnalyzer(AnalyzerConfig(), session=session)

        with pytest.raises(RepositoryFetchError) as exc:
            analyzer.analyze("https://github.com/acme/shop")

        assert exc.value.status_code == 502

    def test_guesses_collections_from_paths(self):
        routes = {
            API: response(json_data={'default_branch': 'main'}),
            f"{API}/git/trees/main?recursive=1": response(json_data={'tree': [
                {'path': 'models/users.js', 'type': 'blob'},
            ]}),
            f"{RAW}/models/users.js": response(text="const mongoose = require('mongoose');"),
        }
        analyzer = RepositoryAnalyzer(AnalyzerConfig(), session=make_session(routes))

        result = analyzer.analyze("https://github.com/acme/shop")

        assert result.collections == ['users']

    def test_token_header(self):
        session = make_session({})
        RepositoryAnalyzer(AnalyzerConfig(github_token="abc"), session=session)

        assert session.headers['Authorization'] == "token abc"
        assert session.headers['User-Agent'] == "MongoFlow-Studio"

    def test_no_token_header_without_token(self):
        session = make_session({})
        RepositoryAnalyzer(AnalyzerConfig(), session=session)

        assert 'Authorization' not in session.headers


class TestHeuristics:

    def test_source_files(self):
        assert is_source_file("src/app.ts")
        assert is_source_file("main.go")
        assert not is_source_file("README.md")
        assert not is_source_file("styles.css")

    def test_driver_mention_without_operations(self):
        scan = scan_source("import mongoose from 'mongoose'")

        assert scan.is_mongo_file
        assert scan.operations == []

    def test_unrelated_file(self):
        assert not scan_source("print('hello')").is_mongo_file

    def test_first_matching_pattern_wins(self):
        content = "db.collection('orders'); mongoose.model('User', schema)"
        assert find_collections(content) == {'orders'}

    def test_guess_from_paths(self):
        assert guess_collections_from_paths(["src/Products/list.js", "lib/x.js"]) == ['products']


class TestFlowDiagram:

    def test_no_files_gives_gateway_and_database(self):
        diagram = build_flow_diagram([])

        assert [n['label'] for n in diagram] == ['API Gateway', 'MongoDB']

    def test_model_node(self):
        files = [{'name': 'User.js', 'path': 'src/models/User.js', 'mongoOperations': ['find']}]

        diagram = build_flow_diagram(files)

        model = next(n for n in diagram if n['type'] == 'model')
        assert model['id'] == '3'
        assert model['label'] == 'User'
        assert model['operations'] == []
