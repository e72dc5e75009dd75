"""批量请求体构建工具单元测试."""

import json
import unittest
from unittest.mock import MagicMock

from bulkflow.bulk import (
    BulkAction,
    BulkBatch,
    BulkBodyBuilder,
    BulkBodyConfig,
    BulkOperation,
)
from bulkflow.bulk.exceptions import BulkValidationError
from bulkflow.bulk.framing import frame_entry


def make_operations(count: int) -> list[BulkOperation]:
    # 单个数字的 ID 和文档，保证每条记录长度相同
    return [
        BulkOperation.index("test-index", {"n": i % 10}, doc_id=str(i % 10))
        for i in range(count)
    ]


def parse_lines(batch: BulkBatch) -> list[dict]:
    """解析批次中的全部 JSON 行（去掉结束分隔符）."""
    assert batch.body.endswith(b"\n\n")
    return [json.loads(line) for line in batch.body[:-1].splitlines()]


class TestBulkBodyBuilder(unittest.TestCase):
    """BulkBodyBuilder 类单元测试."""

    def setUp(self):
        """设置测试环境."""
        self.record_size = len(frame_entry(make_operations(1)[0]))
        self.builder = BulkBodyBuilder(
            BulkBodyConfig(max_size=self.record_size * 3)
        )

    def test_initialization(self):
        """测试初始化."""
        builder = BulkBodyBuilder()
        self.assertEqual(builder.config.max_size, 100 * 1024 * 1024)
        self.assertIsNone(builder.config.max_actions)
        self.assertIsNone(builder.serializer)

    def test_split_by_size(self):
        """测试按大小上限分批."""
        batches = self.builder.build(make_operations(10))

        self.assertEqual([b.count for b in batches], [3, 3, 3, 1])
        self.assertEqual(batches[0].size, self.record_size * 3 + 1)
        self.assertEqual(batches[-1].size, self.record_size + 1)
        for batch in batches:
            self.assertEqual(batch.size, len(batch.body))
            self.assertEqual(len(parse_lines(batch)), batch.count * 2)

    def test_split_by_actions(self):
        """测试按操作数上限分批."""
        builder = BulkBodyBuilder(BulkBodyConfig(max_actions=4))

        batches = builder.build(make_operations(10))

        self.assertEqual([b.count for b in batches], [4, 4, 2])

    def test_exact_actions_no_trailing_batch(self):
        """测试操作数恰好整除时不产生空批次."""
        builder = BulkBodyBuilder(BulkBodyConfig(max_actions=5))

        batches = builder.build(make_operations(10))

        self.assertEqual([b.count for b in batches], [5, 5])

    def test_empty_input(self):
        """测试输入为空."""
        self.assertEqual(self.builder.build([]), [])

    def test_order_preserved(self):
        """测试分批后操作顺序不变."""
        operations = [
            BulkOperation.index("test-index", {"n": i}, doc_id=f"{i:03d}")
            for i in range(20)
        ]

        batches = self.builder.build(operations)

        ids = []
        for batch in batches:
            lines = parse_lines(batch)
            ids.extend(line["index"]["_id"] for line in lines[::2])
        self.assertEqual(ids, [f"{i:03d}" for i in range(20)])

    def test_iter_batches_is_lazy(self):
        """测试流式处理按需消费操作项."""
        consumed = []

        def generate():
            for op in make_operations(10):
                consumed.append(op)
                yield op

        batches = self.builder.iter_batches(generate())
        first = next(batches)

        self.assertEqual(first.count, 3)
        self.assertEqual(len(consumed), 4)

    def test_progress_callback(self):
        """测试进度回调."""
        callback = MagicMock()

        batches = self.builder.iter_batches(
            make_operations(10), progress_callback=callback
        )
        list(batches)

        processed = [call.args[0] for call in callback.call_args_list]
        self.assertEqual(processed, [3, 6, 9, 10])
        self.assertIsInstance(callback.call_args_list[0].args[1], BulkBatch)

    def test_set_config(self):
        """测试更新配置."""
        self.builder.set_config(max_size="1mb", max_actions=100, doc_type="log")

        self.assertEqual(self.builder.config.max_size, 1024 * 1024)
        self.assertEqual(self.builder.config.max_actions, 100)
        self.assertEqual(self.builder.config.doc_type, "log")

    def test_set_config_keeps_doc_type(self):
        """测试未传入 doc_type 时保留原值，传入 None 时关闭 _type."""
        self.builder.set_config(doc_type="log")
        self.builder.set_config(max_actions=10)
        self.assertEqual(self.builder.config.doc_type, "log")

        self.builder.set_config(doc_type=None)
        self.assertIsNone(self.builder.config.doc_type)
        self.assertEqual(self.builder.config.max_actions, 10)

    def test_set_config_invalid(self):
        """测试更新为非法配置."""
        with self.assertRaises(BulkValidationError):
            self.builder.set_config(max_size=0)

    def test_index_documents(self):
        """测试构建批量索引请求体."""
        documents = [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}]

        batches = BulkBodyBuilder().index_documents(
            "users", documents, doc_id_field="id"
        )

        self.assertEqual(len(batches), 1)
        lines = parse_lines(batches[0])
        self.assertEqual(
            lines[0], {"index": {"_index": "users", "_type": "_doc", "_id": "1"}}
        )
        self.assertEqual(lines[1], {"id": 1, "name": "Alice"})
        self.assertEqual(lines[2]["index"]["_id"], "2")

    def test_index_documents_without_type(self):
        """测试 doc_type 为 None 时操作头不包含 _type."""
        builder = BulkBodyBuilder(BulkBodyConfig(doc_type=None))

        batches = builder.index_documents(
            "users", [{"id": 1, "name": "Alice"}], doc_id_field="id"
        )
        lines = parse_lines(batches[0])
        self.assertEqual(lines[0], {"index": {"_index": "users", "_id": "1"}})

        builder.set_config(doc_type=None)
        batches = builder.delete_documents("users", ["1"])
        self.assertEqual(
            parse_lines(batches[0])[0], {"delete": {"_index": "users", "_id": "1"}}
        )

    def test_index_documents_without_id(self):
        """测试不指定ID字段时由 ES 自动生成ID."""
        batches = BulkBodyBuilder().index_documents("users", [{"name": "Alice"}])

        lines = parse_lines(batches[0])
        self.assertEqual(lines[0]["index"]["_id"], "")

    def test_create_documents(self):
        """测试构建批量创建请求体."""
        builder = BulkBodyBuilder(BulkBodyConfig(doc_type="user"))

        batches = builder.create_documents(
            "users", [{"id": "1", "name": "Alice"}], doc_id_field="id"
        )

        lines = parse_lines(batches[0])
        self.assertEqual(
            lines[0], {"create": {"_index": "users", "_type": "user", "_id": "1"}}
        )

    def test_update_documents(self):
        """测试构建批量更新请求体."""
        updates = [
            {"id": "1", "name": "Alice Smith"},
            {"id": "2", "age": 31},
        ]

        batches = BulkBodyBuilder().update_documents("users", updates)

        lines = parse_lines(batches[0])
        self.assertEqual(lines[0]["update"]["_id"], "1")
        self.assertEqual(
            lines[1], {"doc": {"name": "Alice Smith"}, "doc_as_upsert": True}
        )
        self.assertEqual(lines[3], {"doc": {"age": 31}, "doc_as_upsert": True})

    def test_update_documents_missing_id(self):
        """测试批量更新缺少ID字段."""
        with self.assertRaises(BulkValidationError):
            BulkBodyBuilder().update_documents("users", [{"name": "Alice"}])

    def test_delete_documents(self):
        """测试构建批量删除请求体."""
        batches = BulkBodyBuilder().delete_documents("users", ["1", "2", "3"])

        self.assertEqual(batches[0].count, 3)
        lines = parse_lines(batches[0])
        self.assertEqual(
            [line["delete"]["_id"] for line in lines[::2]], ["1", "2", "3"]
        )
        self.assertEqual(lines[1::2], [None, None, None])

    def test_builder_actions(self):
        """测试各辅助方法使用的操作类型."""
        builder = BulkBodyBuilder()
        cases = [
            (builder.index_documents("u", [{"a": 1}]), BulkAction.INDEX),
            (builder.create_documents("u", [{"a": 1}]), BulkAction.CREATE),
            (builder.update_documents("u", [{"id": "1", "a": 1}]), BulkAction.UPDATE),
            (builder.delete_documents("u", ["1"]), BulkAction.DELETE),
        ]
        for batches, action in cases:
            header = parse_lines(batches[0])[0]
            self.assertEqual(list(header), [action.value])


if __name__ == "__main__":
    unittest.main()
