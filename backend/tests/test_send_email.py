"""
SendEmail pipeline tests (validate → resolve → build → append).

Runs the async pipeline directly against a fresh Store; no HTTP involved.
"""

import re
from unittest.mock import patch

import pytest

from app.errors import (
    MalformedRawMessage,
    MissingBody,
    SchemaValidationFailed,
    TemplateNotFound,
    UnsupportedContentKind,
)
from app.models.send_email import SendEmailRequest
from app.models.template import EmailTemplate, TemplateContent
from app.services.send_email import (
    ContentKind,
    resolve_content,
    send_email,
    validate_request,
)
from conftest import encode_raw, make_raw_message


def _simple_payload(**overrides) -> dict:
    payload = {
        "FromEmailAddress": "sender@example.com",
        "Destination": {"ToAddresses": ["to@example.com"]},
        "Content": {
            "Simple": {
                "Subject": {"Data": "Subject line"},
                "Body": {"Html": {"Data": "<p>Hi</p>"}, "Text": {"Data": "Hi"}},
            }
        },
    }
    payload.update(overrides)
    return payload


# ---------------------------------------------------------------------------
# Schema validation
# ---------------------------------------------------------------------------

class TestValidateRequest:

    def test_valid_payload(self):
        request = validate_request(_simple_payload())
        assert request.FromEmailAddress == "sender@example.com"

    def test_missing_content(self):
        with pytest.raises(SchemaValidationFailed) as exc_info:
            validate_request({"FromEmailAddress": "s@x.com"})
        assert "Content" in exc_info.value.detail

    def test_content_must_be_object(self):
        with pytest.raises(SchemaValidationFailed):
            validate_request({"Content": "text"})

    def test_simple_requires_subject(self):
        with pytest.raises(SchemaValidationFailed) as exc_info:
            validate_request({"Content": {"Simple": {"Body": {"Text": {"Data": "x"}}}}})
        assert "Content.Simple.Subject" in exc_info.value.detail

    def test_content_part_requires_data(self):
        with pytest.raises(SchemaValidationFailed):
            validate_request(
                {"Content": {"Simple": {"Subject": {"Data": "s"}, "Body": {"Html": {}}}}}
            )

    def test_addresses_must_be_strings(self):
        with pytest.raises(SchemaValidationFailed):
            validate_request(_simple_payload(Destination={"ToAddresses": [1, 2]}))

    def test_non_object_body(self):
        with pytest.raises(SchemaValidationFailed):
            validate_request(["not", "an", "object"])

    def test_pass_through_fields_are_accepted(self):
        request = validate_request(
            _simple_payload(
                ConfigurationSetName="set",
                EmailTags=[{"Name": "a", "Value": "b"}],
                ListManagementOptions={"ContactListName": "list", "TopicName": "t"},
                FeedbackForwardingEmailAddress="fb@x.com",
                UnknownField=123,
            )
        )
        assert request.ConfigurationSetName == "set"


# ---------------------------------------------------------------------------
# Content resolution
# ---------------------------------------------------------------------------

class TestResolveContent:

    def _resolve(self, content: dict) -> ContentKind:
        return resolve_content(SendEmailRequest.model_validate({"Content": content}))

    def test_simple(self):
        content = _simple_payload()["Content"]
        assert self._resolve(content) is ContentKind.SIMPLE

    def test_raw(self):
        assert self._resolve({"Raw": {"Data": "x"}}) is ContentKind.RAW

    def test_template(self):
        assert self._resolve({"Template": {"TemplateName": "t"}}) is ContentKind.TEMPLATE

    def test_simple_wins_over_raw_and_template(self):
        content = dict(_simple_payload()["Content"], Raw={"Data": "x"}, Template={})
        assert self._resolve(content) is ContentKind.SIMPLE

    def test_raw_wins_over_template(self):
        assert self._resolve({"Raw": {}, "Template": {}}) is ContentKind.RAW

    def test_empty_content(self):
        with pytest.raises(UnsupportedContentKind):
            self._resolve({})


# ---------------------------------------------------------------------------
# Full pipeline
# ---------------------------------------------------------------------------

class TestSendEmail:

    @pytest.mark.asyncio
    async def test_simple_appends_one_record(self, store):
        message_id = await send_email(_simple_payload(), store)

        assert re.match(r"^ses-\d{9}$", message_id)
        emails = store.emails.list()
        assert len(emails) == 1
        assert emails[0].message_id == message_id
        assert emails[0].body.html == "<p>Hi</p>"
        assert emails[0].body.text == "Hi"
        assert emails[0].destination.to == ["to@example.com"]

    @pytest.mark.asyncio
    async def test_rejection_leaves_store_unchanged(self, store):
        payload = _simple_payload()
        payload["Content"]["Simple"]["Body"] = {}

        with pytest.raises(MissingBody):
            await send_email(payload, store)
        assert len(store.emails) == 0

    @pytest.mark.asyncio
    async def test_schema_failure_leaves_store_unchanged(self, store):
        with pytest.raises(SchemaValidationFailed):
            await send_email({}, store)
        assert len(store.emails) == 0

    @pytest.mark.asyncio
    async def test_same_input_twice_gives_two_records(self, store):
        first = await send_email(_simple_payload(), store)
        second = await send_email(_simple_payload(), store)

        emails = store.emails.list()
        assert len(emails) == 2
        assert [e.message_id for e in emails] == [first, second]

    @pytest.mark.asyncio
    async def test_message_ids_are_not_deduplicated(self, store):
        with patch("app.services.email_builder.generate_message_id", return_value="ses-123456789"):
            await send_email(_simple_payload(), store)
            await send_email(_simple_payload(), store)

        assert [e.message_id for e in store.emails.list()] == ["ses-123456789"] * 2

    @pytest.mark.asyncio
    async def test_raw_message(self, store):
        raw = make_raw_message(to="a@x.com, b@x.com", subject=None)
        await send_email({"Content": {"Raw": {"Data": encode_raw(raw)}}}, store)

        email = store.emails.list()[0]
        assert email.destination.to == ["a@x.com", "b@x.com"]
        assert email.subject == "(no subject)"
        assert email.from_ == "sender@example.com"

    @pytest.mark.asyncio
    async def test_malformed_raw_leaves_store_unchanged(self, store):
        with pytest.raises(MalformedRawMessage):
            await send_email({"Content": {"Raw": {"Data": "abc"}}}, store)
        assert len(store.emails) == 0

    @pytest.mark.asyncio
    async def test_template_message(self, store):
        store.templates.put(
            EmailTemplate(
                TemplateName="greet",
                TemplateContent=TemplateContent(Subject="Hi {{name}}", Text="Hello {{name}}"),
                CreatedTimestamp=0,
            )
        )
        await send_email(
            {
                "FromEmailAddress": "sender@example.com",
                "Content": {
                    "Template": {"TemplateName": "greet", "TemplateData": '{"name":"World"}'}
                },
            },
            store,
        )

        email = store.emails.list()[0]
        assert email.subject == "Hi World"
        assert email.body.text == "Hello World"

    @pytest.mark.asyncio
    async def test_unknown_template_leaves_store_unchanged(self, store):
        with pytest.raises(TemplateNotFound) as exc_info:
            await send_email(
                {
                    "FromEmailAddress": "sender@example.com",
                    "Content": {"Template": {"TemplateName": "X"}},
                },
                store,
            )
        assert "X" in exc_info.value.detail
        assert len(store.emails) == 0
