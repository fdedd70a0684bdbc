"""Tests for rendering the client module source."""

import ast

from clientgen.codegen import create_environment, generate, render_definition, render_operation
from clientgen.config import RenderOptions
from clientgen.context_builder import build_context, build_definition_context
from clientgen.model import parse_document


class TestGenerate:
    """Whole-module rendering of the friends fixture."""

    def test_valid_python(self, friends_source):
        ast.parse(friends_source)

    def test_header(self, friends_source):
        assert friends_source.startswith("# Code generated by clientgen. DO NOT EDIT.\n")
        assert '"""Friends API client (version 2.0)."""' in friends_source

    def test_runtime_import(self, friends_source):
        assert "from clientgen.runtime import HttpAdapter, HttpxAdapter, deserialize, serialize" in friends_source

    def test_exception_scaffold(self, friends_source):
        assert "class ApiResponseException(Exception):" in friends_source

    def test_deterministic(self, friends_doc):
        first = generate(build_context(friends_doc))
        second = generate(build_context(friends_doc))
        assert first == second

    def test_definitions_before_client(self, friends_source):
        positions = [friends_source.index(f"class {name}(") for name in (
            "IFriend", "Friend", "IFriendList", "FriendList", "IAccountDevice",
            "AccountDevice", "ISession", "Session", "IRpc", "Rpc", "IGroup", "Group",
        )]
        assert positions == sorted(positions)
        assert positions[-1] < friends_source.index("class ApiClient:")

    def test_methods_in_document_order(self, friends_source):
        names = [
            "GetFriendAsync", "ListFriendsAsync", "AddFriendsAsync",
            "AuthenticateDeviceAsync", "RpcFuncAsync", "GetGroupAsync", "DeleteGroupAsync",
        ]
        positions = [friends_source.index(f"async def {name}(") for name in names]
        assert positions == sorted(positions)

    def test_custom_options(self, friends_doc):
        source = generate(build_context(
            friends_doc, RenderOptions(runtime_module="myapp.transport", client_name="FriendsClient"),
        ))
        assert "from myapp.transport import HttpAdapter" in source
        assert "class FriendsClient:" in source
        assert "class ApiClient:" not in source
        ast.parse(source)

    def test_empty_document(self):
        source = generate(build_context(parse_document({})))
        ast.parse(source)
        assert "class ApiClient:" in source
        assert '"""API client."""' in source


class TestRenderDefinition:
    """Interface + dataclass pair for one definition."""

    def _render(self, doc, name):
        ctx = build_definition_context(name, doc.definitions[name], doc.definitions)
        return render_definition(create_environment(), ctx)

    def test_render_twice_identical(self, friends_doc):
        assert self._render(friends_doc, "Group") == self._render(friends_doc, "Group")

    def test_friend_interface(self, friends_doc):
        source = self._render(friends_doc, "Friend")
        assert "class IFriend(ABC):" in source
        assert "    def UserId(self) -> str:" in source
        assert "    def Online(self) -> bool:" in source
        assert source.index("def UserId") < source.index("def Online")

    def test_wire_names(self, friends_doc):
        source = self._render(friends_doc, "Friend")
        assert 'UserId: Optional[str] = field(default=None, metadata={"wire_name": "user_id"})' in source
        assert 'Online: Optional[bool] = field(default=None, metadata={"wire_name": "online"})' in source

    def test_backing_fields(self, friends_doc):
        source = self._render(friends_doc, "Group")
        assert '_members: Optional[Dict[str, Friend]] = field(default=None, metadata={"wire_name": "members"})' in source
        assert "def Members(self) -> Mapping[str, IFriend]:" in source
        assert "return self._members if self._members is not None else {}" in source
        assert "return self._creator\n" in source
        assert 'LangTags: Optional[List[str]] = field(default=None, metadata={"wire_name": "lang_tags"})' in source

    def test_list_of_ref_backing(self, friends_doc):
        source = self._render(friends_doc, "FriendList")
        assert "def Friends(self) -> Sequence[IFriend]:" in source
        assert "return self._friends if self._friends is not None else []" in source

    def test_str_renders_every_property(self, friends_doc):
        source = self._render(friends_doc, "Group")
        order = ["Name: ", "EdgeCount: ", "LangTags: [", "Creator: ", "Members: ["]
        positions = [source.index(f'"{label}') for label in order]
        assert positions == sorted(positions)

    def test_description_docstring(self, friends_doc):
        source = self._render(friends_doc, "Friend")
        assert '"""A friend of a user."""' in source
        assert '"""The user ID of the friend."""' in source

    def test_definition_without_properties(self):
        doc = parse_document({"definitions": {"Empty": {"description": "Nothing here."}}})
        source = self._render(doc, "Empty")
        ast.parse(source)
        assert 'class IEmpty(ABC):\n    """Nothing here."""\n\n    pass\n' in source
        assert "def __str__(self) -> str:" in source

    def test_interface_with_properties_has_no_pass(self, friends_doc):
        assert "    pass\n" not in self._render(friends_doc, "Friend")


class TestDefinitionNames:
    """Definition names that are not Python identifiers still compile."""

    def _generate(self, definitions):
        return generate(build_context(parse_document({"definitions": definitions})))

    def test_dotted_name(self):
        source = self._generate({
            "v1.Friend": {"properties": {"user_id": {"type": "string"}}},
            "v1.FriendList": {"properties": {"friends": {"type": "array", "items": {"$ref": "#/definitions/v1.Friend"}}}},
        })
        ast.parse(source)
        assert "class V1_Friend(IV1_Friend):" in source
        assert "_friends: Optional[List[V1_Friend]]" in source

    def test_hyphenated_name(self):
        source = self._generate({"friend-list": {"properties": {"cursor": {"type": "string"}}}})
        ast.parse(source)
        assert "class Friend_list(IFriend_list):" in source

    def test_keyword_name(self):
        source = self._generate({
            "none": {},
            "Holder": {"properties": {"value": {"$ref": "#/definitions/none"}}},
        })
        ast.parse(source)
        assert "class None_(INone_):" in source
        assert "def Value(self) -> INone_:" in source


class TestRenderOperation:
    """One client method."""

    def _render(self, friends_doc, method_name):
        ctx = next(o for o in build_context(friends_doc)["operations"] if o["method_name"] == method_name)
        return render_operation(create_environment(), ctx)

    def test_get_friend_signature(self, friends_doc):
        source = self._render(friends_doc, "GetFriendAsync")
        assert "    async def GetFriendAsync(\n        self,\n        bearerToken: Optional[str],\n        id: Optional[str] = None,\n    ) -> IFriend:" in source

    def test_get_friend_body(self, friends_doc):
        source = self._render(friends_doc, "GetFriendAsync")
        assert "raise ValueError(\"'id' is required but was None.\")" in source
        assert 'urlpath = urlpath.replace("{id}", _escape(id))' in source
        assert "if bearerToken:" in source
        assert "return deserialize(Friend, contents)" in source

    def test_required_check_precedes_request(self, friends_doc):
        source = self._render(friends_doc, "RpcFuncAsync")
        assert source.index("'id' is required") < source.index("'body' is required")
        assert source.index("'body' is required") < source.index("self.http_adapter.send")

    def test_repeated_query_key(self, friends_doc):
        source = self._render(friends_doc, "AddFriendsAsync")
        assert "for elem in ids or []:" in source
        assert 'query_params += "ids=" + _escape(elem) + "&"' in source

    def test_basic_auth_header(self, friends_doc):
        source = self._render(friends_doc, "AuthenticateDeviceAsync")
        assert 'headers["Authorization"] = _basic_auth(basicAuthUsername, basicAuthPassword)' in source
        assert "content = serialize(body)" in source

    def test_no_response(self, friends_doc):
        source = self._render(friends_doc, "DeleteGroupAsync")
        assert ") -> None:" in source
        assert "deserialize" not in source
