import unittest
from unittest.mock import patch

from pydantic import ValidationError

from content_fixtures import HERO_DATA, HeroRecord, QuoteRecord
from pigeon import (
    ContentValidationError,
    RegistrationError,
    create_dependency,
    create_registration,
)
from pigeon.config import Settings


def _hero(**kwargs):
    return create_registration("Hero", "title", HeroRecord, **kwargs)


class CreateRegistrationTests(unittest.TestCase):
    def test_generates_fragment_name(self) -> None:
        self.assertEqual(_hero().fragment_name, "HeroFragment")

    def test_wraps_fragment_definition(self) -> None:
        hero = _hero()
        self.assertTrue(hero.fragment.startswith("fragment HeroFragment on Hero {"))
        self.assertEqual(hero.fragment, "fragment HeroFragment on Hero {title}")

    def test_populates_optional_fields(self) -> None:
        hero = _hero()
        self.assertEqual(hero.dependencies, ())
        self.assertEqual(hero.scope, ())
        self.assertIsNone(hero.transform)

    def test_keeps_dependencies(self) -> None:
        image = create_dependency("Image", "", dict)
        hero = _hero(dependencies=[image, "Video"])
        self.assertEqual(len(hero.dependencies), 2)
        self.assertEqual(hero.dependencies[0].typename, "Image")
        self.assertEqual(hero.dependencies[1], "Video")

    def test_does_not_share_dependency_list(self) -> None:
        dependencies = ["Image"]
        hero = _hero(dependencies=dependencies)
        dependencies.append("Video")
        self.assertEqual(hero.dependencies, ("Image",))

    def test_fragment_name_override(self) -> None:
        image = create_dependency("Image", "", dict)
        hero = _hero(fragment_name="CustomHeroFragment", dependencies=[image])
        self.assertEqual(hero.fragment_name, "CustomHeroFragment")
        self.assertTrue(hero.fragment.startswith("fragment CustomHeroFragment on Hero {"))
        self.assertEqual(hero.dependencies[0].typename, "Image")

    def test_fragment_suffix_from_settings(self) -> None:
        with patch("pigeon.registration.get_settings", return_value=Settings(fragment_suffix="Fields")):
            hero = _hero()
        self.assertEqual(hero.fragment_name, "HeroFields")

    def test_single_scope_string_is_not_split(self) -> None:
        self.assertEqual(_hero(scope="page").scope, ("page",))

    def test_dependency_has_no_scope(self) -> None:
        self.assertEqual(create_dependency("Image", "url", dict).scope, ())

    def test_rejects_invalid_names(self) -> None:
        with self.assertRaises(RegistrationError):
            create_registration("Hero Record", "title", dict)
        with self.assertRaises(RegistrationError):
            _hero(fragment_name="1Hero")
        with self.assertRaises(RegistrationError):
            _hero(dependencies=["image-record"])

    def test_rejects_invalid_dependency_type(self) -> None:
        with self.assertRaises(RegistrationError):
            _hero(dependencies=[42])

    def test_rejects_non_callable_transform(self) -> None:
        with self.assertRaises(RegistrationError):
            _hero(transform="upper")

    def test_inline_fragment(self) -> None:
        self.assertEqual(_hero().inline_fragment(), "...on Hero { ...HeroFragment }")


class ParseTests(unittest.TestCase):
    def test_parse_returns_validated_model(self) -> None:
        result = _hero().parse(HERO_DATA)
        self.assertIsInstance(result, HeroRecord)
        self.assertEqual(result.title, "Hello")
        self.assertEqual(result.image.src, "https://example.com/image.jpg")

    def test_parse_applies_transform(self) -> None:
        hero = _hero(transform=lambda record: {"heading": record.title})
        self.assertEqual(hero.parse(HERO_DATA), {"heading": "Hello"})

    def test_parse_invalid_data(self) -> None:
        data = {key: value for key, value in HERO_DATA.items() if key != "title"}
        with self.assertRaises(ContentValidationError) as ctx:
            _hero().parse(data, index=4)
        error = ctx.exception
        self.assertEqual(error.typename, "Hero")
        self.assertEqual(error.index, 4)
        self.assertIsInstance(error.__cause__, ValidationError)
        self.assertEqual(error.errors[0]["loc"], ("title",))
        self.assertIn("record 4 (Hero)", str(error))

    def test_parse_rejects_wrong_typename(self) -> None:
        with self.assertRaises(ContentValidationError):
            _hero().parse({**HERO_DATA, "__typename": "Quote"})

    def test_transform_value_error_is_a_validation_error(self) -> None:
        def reject(record):
            raise ValueError("no heroes today")

        with self.assertRaises(ContentValidationError) as ctx:
            _hero(transform=reject).parse(HERO_DATA)
        self.assertIn("no heroes today", str(ctx.exception))

    def test_parse_refuses_async_transform(self) -> None:
        async def to_props(record):
            return record.title

        with self.assertRaises(RegistrationError):
            _hero(transform=to_props).parse(HERO_DATA)

    def test_plain_type_schema(self) -> None:
        slug = create_dependency("Slug", "value", str)
        self.assertEqual(slug.parse("about-us"), "about-us")
        with self.assertRaises(ContentValidationError):
            slug.parse(3)


class ParseAsyncTests(unittest.IsolatedAsyncioTestCase):
    async def test_awaits_async_transform(self) -> None:
        async def to_props(record):
            return {"text": record.quote.upper()}

        quote = create_registration("Quote", "quote author", QuoteRecord, transform=to_props)
        result = await quote.parse_async(
            {"__typename": "Quote", "id": "q", "quote": "hi", "author": "me"}
        )
        self.assertEqual(result, {"text": "HI"})

    async def test_sync_transform(self) -> None:
        hero = _hero(transform=lambda record: record.title)
        self.assertEqual(await hero.parse_async(HERO_DATA), "Hello")

    async def test_async_transform_value_error(self) -> None:
        async def reject(record):
            raise ValueError("bad quote")

        quote = create_registration("Quote", "quote", QuoteRecord, transform=reject)
        with self.assertRaises(ContentValidationError):
            await quote.parse_async({"__typename": "Quote", "id": "q", "quote": "a", "author": "b"})


if __name__ == "__main__":
    unittest.main()
