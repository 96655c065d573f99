"""Domain Models 单元测试

测试内容：
1. TaskRecord 校验与字段别名
2. TaskDraft -> TaskRecord 的 id / completed 分配
3. DecompositionResult 解析
4. TaskDraft 与 TaskRecord 共享内容字段规则
"""

import pytest
from pydantic import ValidationError
from taskanalyzer.core.models import DecompositionResult, TaskContent, TaskDraft, TaskRecord


class TestTaskRecord:
    """TaskRecord 模型校验"""

    def test_defaults(self):
        """completed 默认 False，timestamp/owner 默认为空"""
        record = TaskRecord(
            id="a",
            description="X",
            creative_idea="idea",
            estimated_time="1h",
            priority="High",
        )
        assert record.completed is False
        assert record.deadline is None
        assert record.timestamp is None
        assert record.owner is None

    def test_camel_case_estimated_time_accepted(self):
        """前端使用的 estimatedTime 键同样可以解析"""
        record = TaskRecord.model_validate(
            {
                "id": "a",
                "description": "X",
                "creative_idea": "idea",
                "estimatedTime": "2h",
                "priority": "Low",
            }
        )
        assert record.estimated_time == "2h"
        assert record.model_dump()["estimated_time"] == "2h"

    def test_blank_deadline_normalized(self):
        """空字符串 deadline 视为无截止时间"""
        record = TaskRecord(
            id="a",
            description="X",
            creative_idea="idea",
            estimated_time="1h",
            priority="High",
            deadline="  ",
        )
        assert record.deadline is None

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError):
            TaskRecord(
                id="",
                description="X",
                creative_idea="idea",
                estimated_time="1h",
                priority="High",
            )

    def test_missing_required_field_rejected(self):
        with pytest.raises(ValidationError):
            TaskRecord.model_validate({"id": "a", "description": "X"})


class TestTaskDraft:
    """分解结果 -> 可存储记录"""

    def test_to_record_assigns_id_and_completed(self):
        draft = TaskDraft(
            description="写周报",
            creative_idea="用表格汇总",
            estimated_time="1小时",
            priority="高",
            deadline="2026-10-19T15:00:00+08:00",
        )
        record = draft.to_record()
        assert record.id
        assert record.completed is False
        assert record.description == "写周报"
        assert record.deadline == "2026-10-19T15:00:00+08:00"
        assert record.timestamp is None
        assert record.owner is None

    def test_draft_shares_record_content_rules(self):
        """camelCase 别名与空 deadline 规则同样作用于分解结果，并完整带入记录"""
        draft = TaskDraft.model_validate(
            {
                "description": "d",
                "creative_idea": "c",
                "estimatedTime": "45分钟",
                "priority": "p",
                "deadline": "",
            }
        )
        assert draft.deadline is None

        record = draft.to_record("r1")
        assert record.model_dump(include=set(TaskContent.model_fields)) == draft.model_dump()
        assert record.estimated_time == "45分钟"

    def test_to_record_ids_are_unique(self):
        draft = TaskDraft(
            description="d", creative_idea="c", estimated_time="t", priority="p"
        )
        ids = {draft.to_record().id for _ in range(50)}
        assert len(ids) == 50

    def test_to_record_explicit_id(self):
        draft = TaskDraft(
            description="d", creative_idea="c", estimated_time="t", priority="p"
        )
        assert draft.to_record("fixed-id").id == "fixed-id"

    def test_decomposition_result_parses_service_json(self):
        """解析分解服务的 {tasks: [...]} 响应，deadline 可为 null"""
        result = DecompositionResult.model_validate_json(
            """
            {"tasks": [
                {"description": "a", "creative_idea": "b", "estimated_time": "1h",
                 "priority": "高", "deadline": null},
                {"description": "c", "creative_idea": "d", "estimated_time": "2h",
                 "priority": "低", "deadline": "2026-10-20T12:00:00+08:00"}
            ]}
            """
        )
        records = result.to_records()
        assert [r.description for r in records] == ["a", "c"]
        assert records[0].deadline is None
        assert all(r.completed is False for r in records)
        assert len({r.id for r in records}) == 2
