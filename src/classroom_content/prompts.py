"""
Prompt templates for content parsing and learning material generation.
"""

SCHOOL_SUBJECTS = [
    "English", "Mathematics", "Science", "Social Studies", "History",
    "Geography", "Physics", "Chemistry", "Biology", "Computer Science",
    "Physical Education", "Arts", "Music", "Languages",
]


# ---------------------------------------------------------------------
# Content Parsing
# ---------------------------------------------------------------------

FULL_ANALYSIS_PROMPT = f"""You are an AI assistant helping teachers organize educational content for school students.

Analyze the text deeply and create a MICRO-FRAGMENTED structure:
1. Identify the school subject (use one of: {", ".join(SCHOOL_SUBJECTS)})
2. Create descriptive chapter names based on major themes or units in the content
3. Break each chapter into MICRO-TOPICS, the smallest teachable units
4. Give each topic a SPECIFIC, DESCRIPTIVE name that says what it teaches
5. Use the actual headings from the text where they exist

Return ONLY valid JSON (no markdown, no code blocks):
{{
  "subjects": [
    {{
      "title": "Subject Name",
      "chapters": [
        {{
          "title": "Chapter Name (e.g. 'Cell Biology', 'Ancient Rome')",
          "topics": [
            {{
              "title": "Micro-Topic Name (e.g. 'Cell Membrane Composition')",
              "content": "Content for this micro-topic..."
            }}
          ]
        }}
      ]
    }}
  ]
}}

RULES:
- Use simple, school-appropriate subject names from the list above
- Never use generic names like "Chapter 1", "Topic 1", "Part A"
- Aim for 10-30 micro-topics for a typical document
- Each topic should be teachable on its own in 2-5 minutes
- Always include the complete content text in each topic
- Never return empty arrays"""


SUBJECT_PROVIDED_PROMPT = """You are organizing educational content for the subject: "{subject}".

Analyze the content and create a HIGHLY GRANULAR structure:
1. Identify or create chapter names based on major themes or units
2. Break each chapter into MICRO-TOPICS (smallest teachable units)
3. Give each topic a SPECIFIC, DESCRIPTIVE name

Return ONLY valid JSON (no markdown, no code blocks):
{{
  "subjects": [
    {{
      "title": "{subject}",
      "chapters": [
        {{
          "title": "Chapter Name",
          "topics": [
            {{
              "title": "Topic Name",
              "content": "Content for this micro-topic..."
            }}
          ]
        }}
      ]
    }}
  ]
}}

RULES:
- Use the provided subject: "{subject}"
- Never use generic names like "Topic 1", "Chapter 1", "Section A"
- For a 5-page document, aim for 10-20 micro-topics across chapters
- Each topic should cover ONE concept that can be taught in 2-5 minutes
- Never return empty arrays"""


FULL_CONTEXT_PROMPT = """You are organizing educational content for:
Subject: "{subject}"
Chapter: "{topic}"

Break the content into MICRO-FRAGMENTS:
1. Create one topic per distinct concept or sub-section
2. Use the actual headings and sub-headings as topic names where they exist

Return ONLY valid JSON (no markdown, no code blocks):
{{
  "subjects": [
    {{
      "title": "{subject}",
      "chapters": [
        {{
          "title": "{topic}",
          "topics": [
            {{
              "title": "Specific Topic Name (NOT 'Topic 1')",
              "content": "Content for this specific concept..."
            }}
          ]
        }}
      ]
    }}
  ]
}}

RULES:
- Use "{topic}" as the chapter title
- Aim for 3-10 micro-topics
- Each topic should be self-contained
- Never return empty arrays"""


PARSE_CONTENT_SUFFIX = """

Analyze this content:

{text}"""


# ---------------------------------------------------------------------
# Learning Material
# ---------------------------------------------------------------------

FLASHCARDS_PROMPT = """You are an expert educator creating engaging learning flashcards.

Based on this educational content, create 8-12 flashcards for students:

{context}

For each flashcard, create:
1. A clear, concise title
2. Main content (2-3 paragraphs explaining the concept)
3. An engaging explanation that simplifies the concept
4. 3-5 key points to remember

Return ONLY valid JSON in this format:
{{
  "flashcards": [
    {{
      "id": 1,
      "title": "Concept Title",
      "content": "Main explanation of the concept...",
      "explanation": "Simplified explanation...",
      "keyPoints": ["Key point 1", "Key point 2", "Key point 3"]
    }}
  ]
}}"""


SUMMARY_PROMPT = """You are an expert educator creating comprehensive study summaries.

Based on this educational content, create a detailed summary:

{context}

Create a summary with:
1. 5-8 key points (most important concepts)
2. 5-10 important definitions with clear explanations
3. 4-6 core concepts that tie everything together

Return ONLY valid JSON in this format:
{{
  "summary": {{
    "keyPoints": ["Key point 1 - detailed explanation"],
    "definitions": [{{"term": "Term name", "definition": "Clear, concise definition"}}],
    "concepts": ["Core concept 1 with explanation"]
  }}
}}"""


TEST_PROMPT = """You are an expert educator creating assessment questions.

Based on this educational content, create 10-15 multiple choice questions:

{context}

Create questions that test understanding, cover all important concepts,
have one clearly correct answer with plausible distractors, and mix
easy, medium and hard difficulty.

Return ONLY valid JSON in this format:
{{
  "testData": {{
    "questions": [
      {{
        "id": 1,
        "question": "Clear question text?",
        "options": ["Option A", "Option B", "Option C", "Option D"],
        "correctAnswer": "Option A",
        "explanation": "Why this is the correct answer",
        "difficulty": "easy"
      }}
    ]
  }}
}}"""


DOUBT_PROMPT = """You are a helpful tutor answering a student's question about a learning topic.

Context (current flashcard):
Title: {title}
Content: {content}
Explanation: {explanation}

Student's Question: {question}

Answer directly, in simple language, with an example if it helps.
Keep the response to 2-4 sentences."""


ANALYZE_TEST_PROMPT = """Analyze the student's test performance.

QUESTIONS & ANSWERS:
{questions}

STUDENT RESULTS:
{results}

Consider the score, response times, how they handled each difficulty
level, weak and strong points, and suggestions for improvement. Finish
with a short motivational line.

Return ONLY valid JSON:
{{
  "score": 0,
  "totalQuestions": 0,
  "weakPoints": ["point 1"],
  "strongPoints": ["point 1"],
  "suggestions": ["suggestion 1"],
  "pickupLine": "string"
}}"""


STUDY_TASKS_PROMPT = """You are an AI study planner. Generate study tasks for today based on the student's exam schedule.

Today: {current_day}
Available Study Time Today: {available_time}

Upcoming Exams:
{exams}

Generate 4-8 prioritized study tasks for today. Focus on:
- Exams happening sooner (higher priority)
- Realistic time estimates that fit the available time
- A mix of learning, revision, and practice

Copy topic ids from the syllabus into "topicIds" for the topics a task covers.

Return ONLY valid JSON (no markdown):
[
  {{
    "id": "unique-id",
    "title": "Task title",
    "subject": "Subject name",
    "chapter": "Chapter name",
    "topics": ["topic1", "topic2"],
    "topicIds": ["id1", "id2"],
    "estimatedDuration": "30 minutes",
    "difficultyLevel": "easy|medium|hard",
    "relatedExam": "Exam name"
  }}
]"""
