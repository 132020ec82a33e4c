"""
tests/hash_core/query/test_evaluator.py
Tests del Evaluador de Queries.
Verifica: operadores escalares, rutas, lógicos y el vector paralelo de pass/fail.
"""
import unittest
import pytest
from hash_core.query.evaluator import Query, evaluate
from hash_core.sentinels import ABSENT


class TestScalarOperators(unittest.TestCase):

    def test_vector_is_parallel(self):
        subjects = [5, 5000, 999, 1000]
        self.assertEqual(Query({"$lt": 1000}).test(subjects), [True, False, True, False])
        self.assertEqual(evaluate({"$gte": 1000}, subjects), [False, True, False, True])

    def test_combined_operators_are_anded(self):
        q = Query({"$gt": 1, "$lte": 3})
        self.assertEqual(q.test([1, 2, 3, 4]), [False, True, True, False])

    def test_equality(self):
        self.assertTrue(Query({"$eq": "a"}).matches("a"))
        self.assertTrue(Query({"$ne": "a"}).matches("b"))
        self.assertTrue(Query(7).matches(7))
        self.assertFalse(Query(7).matches(ABSENT))

    def test_membership(self):
        self.assertTrue(Query({"$in": [1, 2]}).matches(2))
        self.assertFalse(Query({"$in": [1, 2]}).matches(3))
        self.assertTrue(Query({"$in": [1, 2]}).matches([5, 1]))
        self.assertTrue(Query({"$nin": [1, 2]}).matches(3))
        self.assertTrue(Query({"$all": ["a", "b"]}).matches(["b", "c", "a"]))
        self.assertFalse(Query({"$all": ["a", "b"]}).matches(["a"]))

    def test_misc(self):
        self.assertTrue(Query({"$mod": [4, 1]}).matches(9))
        self.assertFalse(Query({"$mod": [4, 1]}).matches("9"))
        self.assertTrue(Query({"$size": 2}).matches([1, 2]))
        self.assertTrue(Query({"$regex": "^Pit"}).matches("Pitcairn"))
        self.assertFalse(Query({"$regex": "^Pit"}).matches(48))

    def test_type(self):
        self.assertTrue(Query({"$type": "number"}).matches(3.5))
        self.assertTrue(Query({"$type": "boolean"}).matches(False))
        self.assertTrue(Query({"$type": "string"}).matches("x"))
        self.assertTrue(Query({"$type": "array"}).matches([1]))
        self.assertTrue(Query({"$type": "object"}).matches({"a": 1}))
        self.assertTrue(Query({"$type": "null"}).matches(None))

    def test_unorderable_subjects_fail(self):
        q = Query({"$lt": 1000})
        self.assertEqual(q.test(["abc", None, ABSENT, {"a": 1}]), [False, False, False, False])

    def test_not(self):
        q = Query({"$not": {"$gt": 10}})
        self.assertEqual(q.test([5, 50]), [True, False])


class TestFieldQueries(unittest.TestCase):

    def setUp(self):
        self.people = [
            {"name": "arthur", "stats": {"age": 30}, "tags": ["human"]},
            {"name": "ford", "stats": {"age": 200}, "tags": ["alien", "writer"]},
            {"name": "marvin"},
        ]

    def test_dotted_field_with_operator(self):
        q = Query({"stats.age": {"$gt": 100}})
        self.assertEqual(q.test(self.people), [False, True, False])

    def test_literal_field(self):
        self.assertEqual(Query({"name": "ford"}).test(self.people), [False, True, False])

    def test_literal_mapping_is_equality(self):
        q = Query({"stats": {"age": 30}})
        self.assertEqual(q.test(self.people), [True, False, False])

    def test_exists(self):
        self.assertEqual(Query({"stats": {"$exists": False}}).test(self.people), [False, False, True])
        self.assertEqual(Query({"tags.1": {"$exists": True}}).test(self.people), [False, True, False])

    def test_logical(self):
        q = Query({"$or": [{"name": "marvin"}, {"stats.age": {"$lt": 50}}]})
        self.assertEqual(q.test(self.people), [True, False, True])

        q = Query({"$and": [{"tags": {"$size": 2}}, {"name": {"$regex": "^f"}}]})
        self.assertEqual(q.test(self.people), [False, True, False])

        q = Query({"$nor": [{"name": "marvin"}, {"name": "ford"}]})
        self.assertEqual(q.test(self.people), [True, False, False])


class TestCompilation(unittest.TestCase):

    def test_unknown_operator(self):
        with pytest.raises(ValueError, match="desconocido"):
            Query({"$between": [1, 2]})
        with pytest.raises(ValueError):
            Query({"field": {"$bogus": 1}})

    def test_logical_requires_list(self):
        with pytest.raises(ValueError):
            Query({"$or": {"a": 1}})

    def test_source_and_repr(self):
        q = Query({"$lt": 3})
        self.assertEqual(q.source, {"$lt": 3})
        self.assertEqual(repr(q), "Query({'$lt': 3})")


if __name__ == '__main__':
    unittest.main()
