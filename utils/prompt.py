def generate_quiz_prompt(context, number_of_questions):
    return f"""
You are an expert quiz creator. Given the following context, generate exactly {number_of_questions} multiple-choice questions.
The questions should be relevant and based solely on the provided text.

IMPORTANT: Your response MUST be a valid JSON array of objects. Do not include any text before or after the array.
Each object must have this exact structure:
{{
    "questionText": "The question text",
    "options": ["Option A", "Option B", "Option C", "Option D"],
    "correctAnswer": "The text of the correct option"
}}

Rules:
- Every question has exactly 4 options.
- "correctAnswer" must be copied exactly from one of the "options".

Context:
---
{context}
---
"""
