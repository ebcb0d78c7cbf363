"""Parameter text generated from a workflow description.

Code node scripts are Jinja2 templates rendered with the description.
"""

import re

from jinja2 import Environment, StrictUndefined


_env = Environment(undefined=StrictUndefined, keep_trailing_newline=False, autoescape=False)
_env.filters["js_string"] = lambda value: value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", " ")


PROCESSING_TEMPLATE = _env.from_string('''// Process webhook data for: {{ description }}
for (const item of $input.all()) {
  // Validate input
  if (!item.json || typeof item.json !== 'object') {
    item.json = { error: 'Invalid input data' };
    continue;
  }

  // Add processing timestamp
  item.json.processed_at = new Date().toISOString();
  item.json.workflow_description = "{{ description | js_string }}";

  // Add your custom processing logic here
  console.log('Processing item:', item.json);
}

return $input.all();''')


ADVANCED_PROCESSING_TEMPLATE = _env.from_string('''// Advanced data processing for: {{ description }}
const processedItems = [];

for (const item of $input.all()) {
  try {
    const processed = {
      original: item.json,
      processed_at: new Date().toISOString(),
      description: "{{ description | js_string }}",
      processing_steps: []
    };

    if (item.json && typeof item.json === 'object') {
      processed.processing_steps.push('validation_passed');

      processed.transformed_data = {
        ...item.json,
        enhanced: true,
        processing_id: Math.random().toString(36).substr(2, 9)
      };
      processed.processing_steps.push('transformation_complete');

      processed.metadata = {
        keys_count: Object.keys(item.json).length,
        has_arrays: Object.values(item.json).some(val => Array.isArray(val)),
        data_size_estimate: JSON.stringify(item.json).length
      };
      processed.processing_steps.push('metadata_added');

    } else {
      processed.error = 'Invalid input format';
      processed.processing_steps.push('validation_failed');
    }

    processedItems.push({ json: processed });

  } catch (error) {
    processedItems.push({
      json: {
        error: error.message,
        original: item.json,
        processing_failed_at: new Date().toISOString()
      }
    });
  }
}

return processedItems;''')


SCHEDULED_PROCESSING_TEMPLATE = _env.from_string('''// Scheduled task processing for: {{ description }}
const taskResults = [];

console.log('Starting scheduled task:', "{{ description | js_string }}");
console.log('Execution time:', new Date().toISOString());

for (const item of $input.all()) {
  const taskResult = {
    task_id: Math.random().toString(36).substr(2, 9),
    execution_time: new Date().toISOString(),
    description: "{{ description | js_string }}",
    input_data: item.json || {},
    status: 'pending'
  };

  try {
    taskResult.processing_start = new Date().toISOString();

    taskResult.result = {
      processed: true,
      message: 'Scheduled task completed successfully'
    };
    taskResult.status = 'completed';

  } catch (error) {
    taskResult.error = error.message;
    taskResult.status = 'failed';
  }

  taskResult.processing_end = new Date().toISOString();
  taskResults.push({ json: taskResult });
}

console.log('Scheduled task completed. Results:', taskResults.length);
return taskResults;''')


BASIC_PROCESSING_TEMPLATE = _env.from_string('''// Basic processing for: {{ description }}
for (const item of $input.all()) {
  item.json.processed = true;
  item.json.processed_at = new Date().toISOString();
  item.json.description = "{{ description | js_string }}";

  console.log('Processing:', item.json);
}

return $input.all();''')


def _first_line(description: str) -> str:
    # Keeps the leading // comment on a single line
    return " ".join(description.split())


class CodeGenerators:
    """Builds scripts and parameter values from a description."""

    @staticmethod
    def processing_code(description: str) -> str:
        return PROCESSING_TEMPLATE.render(description=_first_line(description))

    @staticmethod
    def advanced_processing_code(description: str) -> str:
        return ADVANCED_PROCESSING_TEMPLATE.render(description=_first_line(description))

    @staticmethod
    def scheduled_processing_code(description: str) -> str:
        return SCHEDULED_PROCESSING_TEMPLATE.render(description=_first_line(description))

    @staticmethod
    def basic_processing_code(description: str) -> str:
        return BASIC_PROCESSING_TEMPLATE.render(description=_first_line(description))

    @staticmethod
    def webhook_path(description: str) -> str:
        """First two words longer than 2 chars, hyphen-joined."""
        cleaned = re.sub(r"[^a-z0-9\s]", "", description.lower())
        words = [word for word in cleaned.split(" ") if len(word) > 2][:2]
        return "-".join(words) or "webhook"

    @staticmethod
    def http_method(description: str) -> str:
        text = description.lower()
        if "post" in text or "create" in text or "submit" in text:
            return "POST"
        if "put" in text or "update" in text:
            return "PUT"
        if "delete" in text or "remove" in text:
            return "DELETE"
        return "GET"

    @staticmethod
    def workflow_name(description: str, default: str = "Generated Workflow") -> str:
        """Title-cased first four words longer than 2 chars."""
        words = [word for word in description.split(" ") if len(word) > 2][:4]
        name = " ".join(word[0].upper() + word[1:] for word in words)
        return name or default
