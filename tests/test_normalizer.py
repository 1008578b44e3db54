"""Test code normalization and structural analysis."""

import pytest

from codeplag.normalization import (
    CodeNormalizer, analyze_structure, calculate_structural_penalty,
    create_semantic_signature, normalize_code, prepare_dual_code
)
from codeplag.normalization.normalizer import penalty_factor_for
from codeplag.normalization.patterns import CPP_TABLE, JAVA_TABLE, table_for


TOTAL_JS = (
    "function total(items) {\n"
    "  let sum = 0;\n"
    "  for (const item of items) {\n"
    "    sum += item;\n"
    "  }\n"
    "  return sum;\n"
    "}"
)

ACCUMULATE_JS = (
    "function accumulate(values) {\n"
    "  let acc = 0;\n"
    "  for (const v of values) {\n"
    "    acc += v;\n"
    "  }\n"
    "  return acc;\n"
    "}"
)

MODULAR_PY = (
    "def a():\n    return 1\n\n"
    "def b():\n    return 2\n\n"
    "def c():\n    return 3\n\n"
    "def d():\n    return a() + b() + c()\n"
)

MONOLITHIC_PY = "def main():\n    return 6\n"

MODULAR_CPP = (
    "int square(int x) {\n"
    "    return x * x;\n"
    "}\n"
    "\n"
    "int cube(int x) {\n"
    "    return x * square(x);\n"
    "}\n"
    "\n"
    "int main() {\n"
    "    return cube(3);\n"
    "}\n"
)

MONOLITHIC_CPP = (
    "int main() {\n"
    "    int x = 3;\n"
    "    return x * x * x;\n"
    "}\n"
)


class TestNormalize:
    """Test code normalization."""

    def test_renamed_code_normalizes_identically(self):
        """Consistent renaming does not change the normalized form."""
        assert normalize_code(TOTAL_JS, "javascript") == normalize_code(ACCUMULATE_JS, "javascript")

    def test_identifier_numbering(self):
        """Names are numbered pattern by pattern in first-seen order."""
        expected = (
            "function var2(var3) {\n"
            "  let var0 = 0;\n"
            "  for (const var1 of var3) {\n"
            "    var0 += var1;\n"
            "  }\n"
            "  return var0;\n"
            "}"
        )

        assert normalize_code(TOTAL_JS, "javascript") == expected

    def test_comments_and_strings(self):
        code = "const greeting = \"hello\"; // greet\nconsole.log(greeting, 'x');"

        result = normalize_code(code, "javascript")

        assert result == "const var0 = \"STRING\"; \nconsole.log(var0, 'STRING');"

    def test_python_comments_and_docstrings(self):
        code = (
            "def square(n):\n"
            "    \"\"\"Square a number.\"\"\"\n"
            "    result = n * n  # multiply\n"
            "    return result\n"
        )

        result = normalize_code(code, "python")

        assert result == "def var0(var2):\n    \n    var1 = var2 * var2  \n    return var1"

    def test_keywords_are_not_renamed(self):
        assert normalize_code("const value = compute(null);", "javascript") == "const var0 = compute(null);"

    def test_unknown_language_uses_javascript_rules(self):
        assert normalize_code("// note\nlet x = 1;", "ruby") == "\nlet var0 = 1;"

    def test_java_identifiers(self):
        code = (
            "public int total(int[] values) {\n"
            "    int sum = 0;\n"
            "    for (int value : values) {\n"
            "        sum += value;\n"
            "    }\n"
            "    return sum;\n"
            "}"
        )
        expected = (
            "public int var0(int[] values) {\n"
            "    int var1 = 0;\n"
            "    for (int var2 : values) {\n"
            "        var1 += var2;\n"
            "    }\n"
            "    return var1;\n"
            "}"
        )

        assert normalize_code(code, "java") == expected

    def test_cpp_identifiers(self):
        code = (
            "int addNumbers(int a, int b) {\n"
            "    int sum = a + b; // add\n"
            "    return sum;\n"
            "}"
        )
        expected = (
            "int var0(int var1, int var2) {\n"
            "    int var3 = var1 + var2; \n"
            "    return var3;\n"
            "}"
        )

        assert normalize_code(code, "cpp") == expected

    def test_c_shares_cpp_rules(self):
        code = "int twice(int n) {\n    int doubled = n * 2;\n    return doubled;\n}"

        assert table_for("c") is CPP_TABLE
        assert table_for("c++") is CPP_TABLE
        assert table_for("java") is JAVA_TABLE
        assert normalize_code(code, "c") == normalize_code(code, "cpp")
        assert normalize_code(code, "c") == "int var0(int var1) {\n    int var2 = var1 * 2;\n    return var2;\n}"

    def test_whitespace_cleanup(self):
        code = "\n\tlet x = 1;\r\n\n\n\n\tlet y = x;\n"

        result = normalize_code(code, "javascript")

        assert result == "let var0 = 1;\n\n  let var1 = var0;"

    def test_failure_returns_input(self, monkeypatch):
        """A failing step leaves the code untouched."""
        normalizer = CodeNormalizer()

        def boom(code, language):
            raise RuntimeError("broken table")

        monkeypatch.setattr(normalizer, "remove_comments", boom)

        assert normalizer.normalize("let x = 1;", "javascript") == "let x = 1;"

    def test_prepare_dual_code(self):
        dual = prepare_dual_code(TOTAL_JS, "javascript")

        assert dual.original == TOTAL_JS
        assert dual.normalized == normalize_code(TOTAL_JS, "javascript")
        assert dual.semantic_signature == create_semantic_signature(TOTAL_JS, "javascript")


class TestSemanticSignature:
    """Test the structural digest."""

    def test_signature_format(self):
        code = (
            "function f(x) {\n"
            "  if (x > 0) {\n"
            "    return 1;\n"
            "  }\n"
            "  for (let i = 0; i < x; i++) {}\n"
            "  return 0;\n"
            "}"
        )

        signature = create_semantic_signature(code, "javascript")

        assert signature == "control:if=1,for=1,while=0,return=2 functions:1 lines:7"

    def test_signature_ignores_names(self):
        assert create_semantic_signature(TOTAL_JS) == create_semantic_signature(ACCUMULATE_JS)


class TestStructure:
    """Test structural analysis and the structural penalty."""

    def test_analyze_structure(self):
        code = "if x:\n    pass\nelif y:\n    pass\nelse:\n    pass\nwhile True:\n    break\n"

        stats = analyze_structure(code, "python")

        assert stats.conditionals == 3
        assert stats.loops == 1
        assert stats.returns == 0
        assert stats.functions == 0
        assert stats.lines == 8

    def test_counts_python_functions_and_classes(self):
        stats = analyze_structure(MODULAR_PY + "\nclass Box:\n    pass\n", "python")

        assert stats.functions == 4
        assert stats.classes == 1
        assert stats.returns == 4

    @pytest.mark.parametrize("func_diff, factor", [
        (0, 1.0),
        (1, 0.75),
        (2, 0.5),
        (3, 0.3),
        (7, 0.3),
    ])
    def test_penalty_tiers(self, func_diff, factor):
        assert penalty_factor_for(func_diff) == factor

    def test_modular_vs_monolithic(self):
        """Very different decomposition gets the strongest penalty."""
        penalty = calculate_structural_penalty(MODULAR_PY, MONOLITHIC_PY, "python")

        assert penalty.func_diff == 3
        assert penalty.penalty_factor == 0.3
        assert penalty.applied
        assert penalty.struct1.functions == 4
        assert penalty.struct2.functions == 1

    def test_penalty_is_symmetric(self):
        forward = calculate_structural_penalty(MODULAR_PY, MONOLITHIC_PY, "python")
        backward = calculate_structural_penalty(MONOLITHIC_PY, MODULAR_PY, "python")

        assert forward.penalty_factor == backward.penalty_factor
        assert forward.func_diff == backward.func_diff

    def test_same_structure_has_no_penalty(self):
        penalty = calculate_structural_penalty(TOTAL_JS, ACCUMULATE_JS, "javascript")

        assert penalty.penalty_factor == 1.0
        assert not penalty.applied

    def test_cpp_function_count(self):
        stats = analyze_structure(MODULAR_CPP, "cpp")

        assert stats.functions == 3
        assert stats.returns == 3
        assert stats.classes == 0

    def test_c_penalty_uses_cpp_counts(self):
        penalty = calculate_structural_penalty(MODULAR_CPP, MONOLITHIC_CPP, "c")

        assert penalty.struct1.functions == 3
        assert penalty.struct2.functions == 1
        assert penalty.func_diff == 2
        assert penalty.penalty_factor == 0.5

    def test_java_function_count(self):
        code = (
            "public class Calculator {\n"
            "    public int add(int a, int b) {\n"
            "        return a + b;\n"
            "    }\n"
            "\n"
            "    private static int twice(int a) {\n"
            "        return add(a, a);\n"
            "    }\n"
            "}\n"
        )

        stats = analyze_structure(code, "java")

        assert stats.functions == 2
        assert stats.classes == 1
