# src/apps/academy/api/serializers/exam_serializers.py
"""
Exam Serializers

Question options are sent to candidates without their ``is_correct``
flags.
"""

from rest_framework import serializers

from ...models import Exam, ExamQuestion, ExamAttempt, Practical, PracticalStatus, RecruitmentExamSession


class ExamQuestionSerializer(serializers.ModelSerializer):

    class Meta:
        model = ExamQuestion
        fields = ['id', 'exam', 'question', 'options', 'explanation', 'sort_order']
        read_only_fields = ['exam']

    def validate_options(self, value):
        if not isinstance(value, list) or len(value) < 2:
            raise serializers.ValidationError('At least two options are required')
        for option in value:
            if not isinstance(option, dict) or not str(option.get('text', '')).strip():
                raise serializers.ValidationError('Every option needs a text')
        if sum(1 for option in value if option.get('is_correct')) != 1:
            raise serializers.ValidationError('Exactly one option must be correct')
        return value


class ExamQuestionPublicSerializer(serializers.ModelSerializer):
    options = serializers.SerializerMethodField()

    class Meta:
        model = ExamQuestion
        fields = ['id', 'question', 'options', 'sort_order']

    def get_options(self, obj):
        return [option.get('text', '') for option in obj.options or []]


class ExamListSerializer(serializers.ModelSerializer):
    question_count = serializers.SerializerMethodField()

    class Meta:
        model = Exam
        fields = [
            'id',
            'course',
            'title',
            'passing_score',
            'max_attempts',
            'time_limit_minutes',
            'is_published',
            'question_count',
        ]

    def get_question_count(self, obj) -> int:
        return obj.questions.count()


class ExamDetailSerializer(serializers.ModelSerializer):

    class Meta:
        model = Exam
        fields = [
            'id',
            'course',
            'title',
            'description',
            'passing_score',
            'max_attempts',
            'time_limit_minutes',
            'show_explanations',
            'is_published',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_passing_score(self, value):
        if value > 100:
            raise serializers.ValidationError('Passing score is a percentage (0-100)')
        return value


class ExamSubmitSerializer(serializers.Serializer):
    answers = serializers.DictField(child=serializers.IntegerField(allow_null=True), allow_empty=True)
    recruitmentToken = serializers.CharField(required=False, allow_blank=True)


class ExamAttemptSerializer(serializers.ModelSerializer):

    class Meta:
        model = ExamAttempt
        fields = ['id', 'exam', 'user_id', 'pilot', 'score', 'passed', 'started_at', 'completed_at']


class PracticalSerializer(serializers.ModelSerializer):
    pilot_pid = serializers.CharField(source='pilot.pid', read_only=True)
    pilot_name = serializers.CharField(source='pilot.full_name', read_only=True)

    class Meta:
        model = Practical
        fields = [
            'id',
            'pilot',
            'pilot_pid',
            'pilot_name',
            'course',
            'examiner_id',
            'status',
            'scheduled_at',
            'completed_at',
            'notes',
            'result_notes',
            'replay_file_url',
            'created_at',
        ]
        read_only_fields = ['id', 'status', 'completed_at', 'result_notes', 'created_at']


class PracticalResultSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[PracticalStatus.PASSED, PracticalStatus.FAILED])
    remarks = serializers.CharField(required=False, allow_blank=True, default='')


class RecruitmentSessionSerializer(serializers.ModelSerializer):
    status = serializers.CharField(source='status_label', read_only=True)
    retest_available_at = serializers.DateTimeField(read_only=True)

    class Meta:
        model = RecruitmentExamSession
        fields = [
            'id',
            'exam',
            'application',
            'auth_user_id',
            'discord_user_id',
            'recruitment_channel_id',
            'preferred_pid',
            'pending_email',
            'status',
            'score',
            'passed',
            'completed_at',
            'retest_sent_at',
            'retest_available_at',
            'practical_assigned_at',
            'created_at',
        ]
