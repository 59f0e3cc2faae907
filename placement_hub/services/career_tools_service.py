"""
Career Tools Service - AI resume, interview and career planning tools.

TOOLS:
- resume_enhance      ATS and content suggestions for a resume
- skill_gap_analysis  current vs missing skills with a learning roadmap
- mock_interview      technical / behavioral / situational questions
- career_roadmap      short, medium and long term goals
- resume analyze      scored review of the whole profile
- resume enhance      rewritten, ATS-friendly resume text

Each tool has a static fallback payload returned when the gateway is
rate limited, unpaid, unreachable or answers with something unusable.
"""

import json
import logging
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel

from placement_hub.core.errors import AIGatewayUnavailable
from placement_hub.schemas.schemas import (
    CareerRoadmapResult,
    CareerToolAction,
    EnhancedResume,
    JobOpportunity,
    MockInterviewResult,
    ResumeAction,
    ResumeAnalysis,
    ResumeEnhanceResult,
    SkillGapResult,
)
from placement_hub.services.ai_gateway_client import AIGatewayClient
from placement_hub.services.profile_service import build_student_snapshot
from placement_hub.services.structured_completion import CompletionResult, StructuredCompletion

logger = logging.getLogger(__name__)


class ToolSpec:
    def __init__(
        self,
        schema: Type[BaseModel],
        system_prompt: str,
        instructions: str,
        fallback: Dict[str, Any],
        temperature: Optional[float] = 0.7,
        max_tokens: Optional[int] = 2000
    ):
        self.schema = schema
        self.system_prompt = system_prompt
        self.instructions = instructions
        self.fallback = fallback
        self.temperature = temperature
        self.max_tokens = max_tokens


# ============================================================
# CAREER TOOLS
# ============================================================

CAREER_TOOLS: Dict[CareerToolAction, ToolSpec] = {
    CareerToolAction.resume_enhance: ToolSpec(
        ResumeEnhanceResult,
        "You are an expert resume enhancement AI. Analyze the resume and provide specific, "
        "actionable improvements for ATS optimization and recruiter appeal.",
        """Provide:
1. ATS optimization suggestions
2. Content improvements
3. Format recommendations
4. Skills gap analysis
5. Action items for improvement

Respond ONLY in JSON with keys: ats_improvements, content_suggestions, format_tips, skill_gaps, action_items.""",
        {
            "ats_improvements": [
                "Use standard section headings (Experience, Education, Skills)",
                "Include relevant keywords from job descriptions",
                "Use bullet points for achievements",
                "Quantify accomplishments with numbers",
            ],
            "content_suggestions": [
                "Start bullet points with action verbs",
                "Focus on achievements, not responsibilities",
                "Tailor content to target role",
                "Keep descriptions concise and impactful",
            ],
            "format_tips": [
                "Use consistent formatting throughout",
                "Choose a clean, professional layout",
                "Ensure good white space distribution",
                "Use 10-12pt font size",
            ],
        },
    ),
    CareerToolAction.skill_gap_analysis: ToolSpec(
        SkillGapResult,
        "You are a career development expert specializing in skill gap analysis. Analyze the "
        "student's current skills against market demands and career goals.",
        """Provide:
1. Current skill assessment
2. Missing skills for career goals
3. Skill development roadmap
4. Recommended certifications
5. Learning resources

Respond ONLY in JSON with keys: current_skills, missing_skills, development_roadmap, certifications, resources.""",
        {
            "missing_skills": [
                "Cloud platforms (AWS, Azure, GCP)",
                "Advanced programming frameworks",
                "Data analysis tools",
                "Project management skills",
            ],
            "development_roadmap": [
                "Complete online courses in missing skills",
                "Build projects showcasing new skills",
                "Obtain relevant certifications",
                "Join professional communities",
            ],
        },
    ),
    CareerToolAction.mock_interview: ToolSpec(
        MockInterviewResult,
        "You are an AI interview coach. Generate relevant interview questions and provide "
        "feedback based on the student's profile and target role.",
        """Generate:
1. 5 technical questions relevant to their skills
2. 3 behavioral questions
3. 2 situational questions
4. Expected answer guidelines
5. Interview tips specific to their profile

Respond ONLY in JSON with keys: technical_questions, behavioral_questions, situational_questions, answer_guidelines, interview_tips.""",
        {
            "technical_questions": [
                "Explain your most challenging project",
                "How do you stay updated with technology trends?",
                "Describe your problem-solving approach",
            ],
            "behavioral_questions": [
                "Tell me about a time you worked in a team",
                "How do you handle tight deadlines?",
                "Describe a difficult situation you overcame",
            ],
        },
    ),
    CareerToolAction.career_roadmap: ToolSpec(
        CareerRoadmapResult,
        "You are a career planning expert. Create personalized career roadmaps based on "
        "student profiles and market trends.",
        """Create a career roadmap including:
1. Short-term goals (6 months)
2. Medium-term goals (1-2 years)
3. Long-term goals (3-5 years)
4. Required skills for each phase
5. Milestone achievements
6. Industry insights and trends

Respond ONLY in JSON with keys: short_term, medium_term, long_term, skill_timeline, milestones, industry_trends.""",
        {
            "short_term": [
                "Complete current degree with strong GPA",
                "Build 2-3 substantial projects",
                "Apply for internships",
                "Develop networking skills",
            ],
            "medium_term": [
                "Secure entry-level position",
                "Gain 1-2 years professional experience",
                "Pursue relevant certifications",
                "Take on leadership responsibilities",
            ],
            "long_term": [
                "Advance to senior technical role",
                "Consider specialization or management track",
                "Mentor junior developers",
                "Contribute to open source projects",
            ],
        },
    ),
}


# ============================================================
# RESUME ENHANCER
# ============================================================

RESUME_TOOLS: Dict[ResumeAction, ToolSpec] = {
    ResumeAction.analyze: ToolSpec(
        ResumeAnalysis,
        """You are an expert resume analyzer and career counselor. Analyze a student's profile
and give actionable feedback to improve their employability: skill gaps, project portfolio,
profile completeness, resume content and skill development.

Return ONLY valid JSON:
{
  "overall_score": 0-100,
  "strengths": ["string"],
  "weaknesses": ["string"],
  "missing_skills": ["string"],
  "project_suggestions": ["string"],
  "profile_improvements": ["string"],
  "certification_recommendations": ["string"],
  "action_plan": [{"priority": "high|medium|low", "action": "string", "timeline": "string", "impact": "string"}]
}""",
        "Analyze this student's profile and provide comprehensive feedback.",
        {
            "overall_score": 70,
            "strengths": ["Technical foundation"],
            "weaknesses": ["Profile needs completion"],
            "missing_skills": ["Communication", "Leadership"],
            "project_suggestions": ["Build more complex projects"],
            "profile_improvements": ["Complete all profile sections"],
            "certification_recommendations": ["Industry-relevant certifications"],
            "action_plan": [{
                "priority": "high",
                "action": "Complete profile",
                "timeline": "1 week",
                "impact": "Improves visibility to recruiters",
            }],
        },
        temperature=None,
        max_tokens=None,
    ),
    ResumeAction.enhance: ToolSpec(
        EnhancedResume,
        """You are an expert resume writer for students and entry-level candidates. Build a
professional, ATS-friendly resume from the profile: clean format, quantified achievements,
action verbs and industry keywords, with Contact, Summary, Education, Projects, Skills and
Certifications sections.

Return ONLY valid JSON:
{
  "enhanced_resume": "Full resume text",
  "improvements_made": ["string"],
  "ats_score": 0-100,
  "keywords_added": ["string"],
  "formatting_tips": ["string"]
}""",
        "Create an enhanced resume for this student.",
        {
            "enhanced_resume": "Resume enhancement failed. Please try again.",
            "improvements_made": [],
            "ats_score": 0,
            "keywords_added": [],
            "formatting_tips": ["Please provide more details for better enhancement"],
        },
        temperature=None,
        max_tokens=None,
    ),
}


class CareerToolsService:
    """
    Runs one AI career tool for one student.
    """

    def __init__(self, client: Optional[AIGatewayClient] = None):
        self.client = client

    def _user_prompt(
        self,
        snapshot: Dict[str, Any],
        instructions: str,
        resume_text: Optional[str],
        target_job: Optional[JobOpportunity]
    ) -> str:
        parts = [f"Student Data:\n{json.dumps(snapshot, indent=2, default=str)}"]
        if resume_text:
            parts.append(f"Current Resume Text:\n{resume_text}")
        if target_job:
            parts.append(
                f"Target Job:\n{json.dumps(target_job.model_dump(mode='json'), indent=2)}\n"
                "Tailor the answer to this specific position."
            )
        parts.append(instructions)
        return "\n\n".join(parts)

    def _run(
        self,
        tool: ToolSpec,
        profile: dict,
        resume_text: Optional[str],
        target_job: Optional[JobOpportunity],
        include_contact: bool = False
    ) -> CompletionResult:
        snapshot = build_student_snapshot(profile, include_contact=include_contact)
        completion = StructuredCompletion(
            tool.schema,
            tool.fallback,
            client=self.client,
            temperature=tool.temperature,
            max_tokens=tool.max_tokens
        )
        return completion.run(
            tool.system_prompt,
            self._user_prompt(snapshot, tool.instructions, resume_text, target_job)
        )

    def run_tool(
        self,
        profile: dict,
        action: CareerToolAction,
        resume_text: Optional[str] = None,
        target_job: Optional[JobOpportunity] = None
    ) -> CompletionResult:
        action = CareerToolAction(action)
        tool = CAREER_TOOLS[action]
        logger.info("Career tool %s for student %s", action.value, profile["user_id"])
        result = self._run(tool, profile, resume_text, target_job)
        if result.error == AIGatewayUnavailable.MALFORMED_RESPONSE and result.raw_content:
            result.data["analysis"] = result.raw_content
        return result

    def resume(
        self,
        profile: dict,
        action: ResumeAction,
        resume_text: Optional[str] = None,
        target_job: Optional[JobOpportunity] = None
    ) -> CompletionResult:
        action = ResumeAction(action)
        tool = RESUME_TOOLS[action]
        logger.info("Resume %s for student %s", action.value, profile["user_id"])
        return self._run(tool, profile, resume_text, target_job, include_contact=True)


def get_career_tools_service() -> CareerToolsService:
    return CareerToolsService()
