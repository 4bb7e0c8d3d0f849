import unittest

from pocketcalc.model.expression import (
    EvaluationError,
    ExpressionError,
    ParseError,
    TokenKind,
    parse,
    tokenize,
)


def evaluate(text):
    return parse(text).evaluate()


class TokenizerTests(unittest.TestCase):
    def test_splits_numbers_operators_and_parentheses(self):
        tokens = tokenize("12.5*(3+4)")
        self.assertEqual([t.text for t in tokens], ["12.5", "*", "(", "3", "+", "4", ")"])
        self.assertEqual(tokens[0].kind, TokenKind.NUMBER)
        self.assertEqual(tokens[2].kind, TokenKind.OPEN)
        self.assertEqual(tokens[-1].kind, TokenKind.CLOSE)

    def test_operator_followed_by_prefix_operators(self):
        self.assertEqual([t.text for t in tokenize("1*-2")], ["1", "*", "-", "2"])
        self.assertEqual([t.text for t in tokenize("1>=-2")], ["1", ">=", "-", "2"])
        self.assertEqual([t.text for t in tokenize("1--2")], ["1", "-", "-", "2"])

    def test_two_character_operators_stay_whole(self):
        self.assertEqual([t.text for t in tokenize("1<=2&&3!=4")], ["1", "<=", "2", "&&", "3", "!=", "4"])

    def test_unknown_operator_run_is_an_invalid_token(self):
        with self.assertRaises(ParseError) as ctx:
            tokenize("1//1")
        self.assertEqual(str(ctx.exception), "Invalid token: '//'")

        with self.assertRaises(ParseError) as ctx:
            tokenize("1=2")
        self.assertEqual(str(ctx.exception), "Invalid token: '='")

    def test_letters_are_invalid_tokens(self):
        with self.assertRaises(ParseError) as ctx:
            tokenize("x")
        self.assertEqual(str(ctx.exception), "Invalid token: 'x'")

    def test_whitespace_is_skipped(self):
        self.assertEqual([t.text for t in tokenize(" 1 +  2 ")], ["1", "+", "2"])


class ArithmeticTests(unittest.TestCase):
    def test_basic_operations(self):
        self.assertEqual(evaluate("1+1"), 2.0)
        self.assertEqual(evaluate("2-1"), 1.0)
        self.assertEqual(evaluate("3/2"), 1.5)
        self.assertEqual(evaluate("5*2"), 10.0)
        self.assertEqual(evaluate("10%4"), 2.0)

    def test_results_are_floats(self):
        self.assertIsInstance(evaluate("1+1"), float)

    def test_precedence_and_associativity(self):
        self.assertEqual(evaluate("2+3*4"), 14.0)
        self.assertEqual(evaluate("2*(3+4)"), 14.0)
        self.assertEqual(evaluate("7-2-1"), 4.0)
        self.assertEqual(evaluate("8/2/2"), 2.0)
        self.assertEqual(evaluate("2**3**2"), 512.0)
        self.assertEqual(evaluate("-2**2"), -4.0)
        self.assertEqual(evaluate("2**-1"), 0.5)

    def test_decimal_literals(self):
        self.assertAlmostEqual(evaluate("2.2+7.8"), 10.0)
        self.assertEqual(evaluate(".5+1."), 1.5)

    def test_prefix_minus(self):
        self.assertEqual(evaluate("-3"), -3.0)
        self.assertEqual(evaluate("1--1"), 2.0)
        self.assertEqual(evaluate("2*-3"), -6.0)
        self.assertEqual(evaluate("-(2+3)"), -5.0)

    def test_implicit_multiplication_after_parentheses(self):
        self.assertEqual(evaluate("(2)3"), 6.0)
        self.assertEqual(evaluate("(1+1)(2+2)"), 8.0)

    def test_number_before_group_is_not_multiplied(self):
        with self.assertRaises(ParseError) as ctx:
            parse("2(3)")
        self.assertEqual(str(ctx.exception), "Unexpected token '('")

    def test_long_flat_chains(self):
        self.assertEqual(evaluate("+".join(["1"] * 1200)), 1200.0)
        self.assertEqual(evaluate("-".join(["1"] * 1500)), -1498.0)
        self.assertEqual(evaluate("*".join(["1"] * 2000)), 1.0)
        self.assertIs(evaluate("||".join(["(1>2)"] * 1200)), False)

    def test_coalescing_inside_a_chain(self):
        self.assertEqual(evaluate("(()??2)+3"), 5.0)
        self.assertIsNone(evaluate("1+()+2"))

    def test_bitwise_and_shift_operators(self):
        self.assertEqual(evaluate("6&3"), 2.0)
        self.assertEqual(evaluate("6|3"), 7.0)
        self.assertEqual(evaluate("6^3"), 5.0)
        self.assertEqual(evaluate("1<<4"), 16.0)
        self.assertEqual(evaluate("256>>4"), 16.0)
        self.assertEqual(evaluate("~0"), -1.0)


class LogicTests(unittest.TestCase):
    def test_comparisons_return_bools(self):
        self.assertIs(evaluate("1<2"), True)
        self.assertIs(evaluate("2<=1"), False)
        self.assertIs(evaluate("1==1"), True)
        self.assertIs(evaluate("1!=1"), False)
        self.assertIs(evaluate("1>=-1"), True)

    def test_logical_operators(self):
        self.assertIs(evaluate("1<2&&2<1"), False)
        self.assertIs(evaluate("1<2||2<1"), True)
        self.assertIs(evaluate("!(1>2)"), True)
        self.assertIs(evaluate("(1>0)==(2>0)"), True)

    def test_ternary(self):
        self.assertEqual(evaluate("1>0?5:6"), 5.0)
        self.assertEqual(evaluate("1<0?5:6"), 6.0)
        self.assertIsNone(evaluate("1<0?5"))
        self.assertEqual(evaluate("1<0?5:2>1?7:8"), 7.0)


class EmptyValueTests(unittest.TestCase):
    def test_empty_group_has_no_value(self):
        self.assertIsNone(evaluate("()"))

    def test_empty_value_spreads_through_operators(self):
        self.assertIsNone(evaluate("()9"))
        self.assertIsNone(evaluate("()955"))
        self.assertIsNone(evaluate("()+1"))
        self.assertIsNone(evaluate("-()"))

    def test_coalescing_replaces_empty_value(self):
        self.assertEqual(evaluate("()??7"), 7.0)
        self.assertEqual(evaluate("3??7"), 3.0)


class ParseErrorTests(unittest.TestCase):
    def assertParseError(self, text, message):
        with self.assertRaises(ParseError) as ctx:
            parse(text)
        self.assertEqual(str(ctx.exception), message)

    def test_empty_and_incomplete_expressions(self):
        self.assertParseError("", "Unexpected end of expression")
        self.assertParseError("1/", "Unexpected end of expression")
        self.assertParseError("1+2*", "Unexpected end of expression")

    def test_unbalanced_parentheses(self):
        self.assertParseError("(1", "Unbalanced parenthesis")
        self.assertParseError("1)", "Unexpected token ')'")

    def test_malformed_numbers(self):
        self.assertParseError("1.2.3", "Unable to parse numeric value '1.2.3'")
        self.assertParseError(".", "Unable to parse numeric value '.'")

    def test_adjacent_numbers(self):
        self.assertParseError("1 2", "Unexpected token '2'")

    def test_stray_operators(self):
        self.assertParseError("*1", "Unexpected token '*'")
        self.assertParseError("1:2", "Unexpected token ':'")

    def test_deep_nesting_is_rejected(self):
        self.assertParseError("(" * 60 + "1" + ")" * 60, "Expression is nested too deeply")

    def test_moderate_nesting_is_fine(self):
        self.assertEqual(evaluate("(" * 10 + "1" + ")" * 10), 1.0)


class EvaluationErrorTests(unittest.TestCase):
    def assertEvaluationError(self, text, fragment):
        with self.assertRaises(EvaluationError) as ctx:
            evaluate(text)
        self.assertIn(fragment, str(ctx.exception))

    def test_division_by_zero(self):
        self.assertEvaluationError("1/0", "Division by zero")
        self.assertEvaluationError("5%0", "Division by zero")

    def test_type_mismatches(self):
        self.assertEvaluationError("1+(1>0)", "it is not a number")
        self.assertEvaluationError("1&&1", "it is not a bool")
        self.assertEvaluationError("1?2:3", "it is not a bool")
        self.assertEvaluationError("(1>0)==1", "Cannot compare")

    def test_power_errors(self):
        self.assertEvaluationError("(0-8)**0.5", "has no real result")
        self.assertEvaluationError("10**400", "Numeric overflow")

    def test_negative_shift(self):
        self.assertEvaluationError("1<<-1", "Negative shift count")

    def test_errors_share_a_base_class(self):
        with self.assertRaises(ExpressionError):
            evaluate("1/0")
        with self.assertRaises(ExpressionError):
            parse("1/")


class ExpressionObjectTests(unittest.TestCase):
    def test_keeps_source_text(self):
        expression = parse("1+2")
        self.assertEqual(expression.source, "1+2")
        self.assertEqual(repr(expression), "Expression('1+2')")

    def test_can_be_evaluated_repeatedly(self):
        expression = parse("3*3")
        self.assertEqual(expression.evaluate(), 9.0)
        self.assertEqual(expression.evaluate(), 9.0)


if __name__ == "__main__":
    unittest.main()
