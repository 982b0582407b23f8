LANGUAGE_NAMES = {"en": "English", "nl": "Dutch"}


ADAPTIVE_LEARNING_GOALS_TEMPLATE = """You are the learning coach of "Javanese Journey", an app for learning Javanese.
Write between 3 and 5 personalised learning goals for today, in {{targetLanguageName}}.

Learner progress so far:
{{{learningProgress}}}

Preferred learning style: {{{preferredLearningStyle}}}
Time available today: {{{timeAvailable}}}
Overall level: {{languageLevel}}
{{#if recentScores}}
Recent quiz scores:
{{#each recentScores}}
- {{this.quizName}}: {{this.score}}%
{{/each}}
{{/if}}

Rules:
1. Each goal is one concrete, achievable task (for example "Learn 5 Javanese words for food" or
   "Rewrite 3 ngoko sentences in krama"). Work on weak spots first, build on recent successes.
2. Fewer or smaller goals when little time is available. Match the difficulty to the level.
3. "explanation": one or two sentences on why these goals were chosen.
4. "progress": one encouraging sentence summarising the learner's progress.

Return JSON with the fields "dailyGoals" (list of strings, ordered by priority), "explanation" and "progress".
"""


QUIZ_FOR_WORD_TEMPLATE = """You create Javanese vocabulary quizzes for "Javanese Journey".
Build one quiz with exactly ONE question about the word below.

Word:
- id: {{word.id}}
- Javanese: {{word.javanese}}
- Dutch: {{word.dutch}}
- Category: {{word.category}}
- Level: {{word.level}}
- Formality: {{word.formality}}
- Example sentence (Javanese): {{word.exampleSentenceJavanese}}
- Example sentence (Dutch): {{word.exampleSentenceDutch}}

Quiz parameters:
- Question type: {{targetQuestionType}}
- Difficulty: {{difficulty}}
- Write the title, description and explanation in {{targetLanguageName}}.

Question types:
- multiple-choice: ask which statement about '{{word.javanese}}' is true. One correct fact, 2-3 wrong ones.
- translation-word-to-dutch: questionText is the Javanese word itself; options are Dutch words, '{{word.dutch}}' is correct.
- translation-word-to-javanese: questionText is the Dutch word itself; options are Javanese words, '{{word.javanese}}' is correct.
- translation-sentence-to-dutch / translation-sentence-to-javanese: use the example sentence when present, otherwise a
  short sentence containing the word; options are translations of the whole sentence.
- fill-in-the-blank-mcq: the Javanese example sentence with '{{word.javanese}}' replaced by '_______';
  options are '{{word.javanese}}' plus 2 wrong words that fit grammatically.
- fill-in-the-blank-text-input: same sentence with a blank; exactly one option, '{{word.javanese}}', marked correct.

Difficulty changes the distractors only: easy distractors are clearly wrong, medium and hard ones are close in
meaning or form. Exactly one option has "isCorrect": true. Do not prefix options with letters or numbers.

Quiz JSON fields: "title", "description", "category", "difficulty", "status" ("draft"), and "questions", a list with
one object holding "questionType", "questionText", "options" (objects with "text" and "isCorrect") and
"explanation" (why the correct answer is right, mentioning the Dutch translation).
"""


GRAMMAR_CONTENT_ASSIST_TEMPLATE = """You are a Javanese curriculum editor for "Javanese Journey".
A grammar lesson is being written in English and Dutch. Handle the title and the explanation separately:

- Only one language version present: keep it (proofread) and translate it into the missing language.
- Both language versions present: proofread both in place. Fix spelling, grammar and clarity only;
  return the text unchanged when it is already correct.
- Neither version present: return an empty string for both languages of that field.

Explanations use Markdown (headings, lists, bold). Keep them at the lesson level; for Beginner keep them simple.

Lesson category: <%= it.category %>
Lesson level: <%= it.level %>

English title: <%= it.titleEn %>
Dutch title: <%= it.titleNl %>

English explanation:
<%= it.explanationEn %>

Dutch explanation:
<%= it.explanationNl %>

Return JSON with "assistedTitleEn", "assistedTitleNl", "assistedExplanationEn", "assistedExplanationNl"
and "feedbackMessage", a one-sentence summary of what you translated or corrected.
"""
